"""
Prediction Session

The prediction slice of the application state. One session serves one
interactive user: it fetches the forecast, runs the orchestrator and lets
the user switch the displayed model without retraining.

Overlapping refreshes are serialized with a request token: every call takes
a new token, and only the call holding the latest token may publish. A
superseded call's result is discarded.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import structlog

from .config import get_settings
from .data.history import MoodHistory
from .inference.points import PredictionPoint
from .inference.predictor import (
    ModelForecast,
    ModelMetrics,
    PredictionBundle,
    PredictionError,
    PredictorConfig,
    predict_from_forecast,
)
from .integrations.weather_service import (
    InvalidCityError,
    WeatherService,
    WeatherServiceError,
    validate_city,
)

logger = structlog.get_logger(__name__)

MODEL_CHOICES = ('best', 'linear', 'knn', 'tree', 'heuristic')


@dataclass
class PredictionState:
    """What the UI renders for the forecast panel."""

    city: str = ""
    city_label: str = ""
    status: str = "idle"  # idle | loading | success | error
    error: Optional[str] = None
    chart: List[PredictionPoint] = field(default_factory=list)
    reasons: List[str] = field(default_factory=list)
    baseline: Optional[str] = None
    model_metrics: Optional[ModelMetrics] = None
    all_models: Dict[str, ModelForecast] = field(default_factory=dict)
    selected_model: str = "best"
    last_updated: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'city': self.city,
            'city_label': self.city_label,
            'status': self.status,
            'error': self.error,
            'chart': [p.to_dict() for p in self.chart],
            'reasons': list(self.reasons),
            'baseline': self.baseline,
            'model_metrics': self.model_metrics.to_dict() if self.model_metrics else None,
            'all_models': {k: v.to_dict() for k, v in self.all_models.items()},
            'selected_model': self.selected_model,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }


class PredictionSession:
    """
    Drives forecast requests for a single user.

    Args:
        weather_service: Object exposing ``async fetch_city_forecast(city)``;
            defaults to a WeatherService built from settings
        history: The user's logged moods, for the heuristic forecast
        config: Pipeline configuration; defaults from settings
        rng: Random source for the synthetic corpus
        clock: Returns "today"; injectable for tests
    """

    def __init__(
        self,
        weather_service=None,
        history: Optional[MoodHistory] = None,
        config: Optional[PredictorConfig] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], date] = date.today,
    ):
        settings = get_settings()
        self.weather_service = weather_service or WeatherService.from_settings(settings)
        self.history = history
        self.config = config or PredictorConfig.from_settings(settings)
        self.rng = rng
        self.clock = clock

        self.state = PredictionState(city=settings.default_city)
        self._bundle: Optional[PredictionBundle] = None
        self._request_id = 0

    @property
    def bundle(self) -> Optional[PredictionBundle]:
        return self._bundle

    def _is_current(self, token: int) -> bool:
        return token == self._request_id

    def _fail(self, message: str) -> None:
        self._bundle = None
        self.state.status = "error"
        self.state.error = message
        self.state.chart = []
        self.state.reasons = []
        self.state.baseline = None
        self.state.model_metrics = None
        self.state.all_models = {}
        self.state.selected_model = "best"

    async def refresh_prediction(self, city: Optional[str] = None) -> PredictionState:
        """
        Fetch the forecast for ``city`` (or the current city) and retrain.

        Errors never propagate: the state enters ``status="error"`` with a
        message and every previous result is cleared.
        """
        self._request_id += 1
        token = self._request_id

        try:
            city = validate_city(self.state.city if city is None else city)
        except InvalidCityError as e:
            logger.info("prediction_rejected", reason=e.message)
            self._fail(e.message)
            return self.state

        self.state.city = city
        self.state.status = "loading"
        self.state.error = None
        logger.info("prediction_requested", city=city, request=token)

        try:
            forecast = await self.weather_service.fetch_city_forecast(city)
            if not self._is_current(token):
                logger.info("prediction_discarded", city=city, request=token, stage="forecast")
                return self.state

            bundle = predict_from_forecast(
                forecast.days,
                today=self.clock(),
                rng=self.rng,
                history=self.history,
                config=self.config,
            )
        except WeatherServiceError as e:
            if self._is_current(token):
                logger.warning("prediction_failed", city=city, error=e.message)
                self._fail(e.message)
            return self.state
        except PredictionError as e:
            if self._is_current(token):
                logger.warning("prediction_failed", city=city, error=str(e))
                self._fail(str(e))
            return self.state
        except Exception as e:
            if self._is_current(token):
                logger.exception("prediction_crashed", city=city, error=str(e))
                self._fail(f"Unexpected error while preparing the forecast: {e}")
            return self.state

        if not self._is_current(token):
            logger.info("prediction_discarded", city=city, request=token, stage="training")
            return self.state

        self._bundle = bundle
        self.state.city_label = forecast.city_label
        self.state.status = "success"
        self.state.error = None
        self.state.reasons = list(bundle.reasons)
        self.state.baseline = bundle.baseline
        self.state.all_models = dict(bundle.all_models)
        self.state.last_updated = datetime.now(timezone.utc)
        try:
            self.select_prediction_model(self.state.selected_model)
        except ValueError:
            # previously selected model did not survive this retraining
            self.select_prediction_model('best')

        logger.info(
            "prediction_ready",
            city=forecast.city_label,
            best_model=bundle.best_model,
            test_r2=round(bundle.model_metrics.test_r2, 4),
        )
        return self.state

    def select_prediction_model(self, name: str) -> PredictionState:
        """
        Switch the chart to another trained model without retraining.

        ``heuristic`` shows the personal-baseline forecast; it carries no
        held-out metrics, so ``model_metrics`` becomes None.

        Raises:
            ValueError: Unknown name, no prediction yet, or the model is
                absent from the current bundle
        """
        if name not in MODEL_CHOICES:
            raise ValueError(f"Unknown model '{name}', expected one of {', '.join(MODEL_CHOICES)}")
        bundle = self._bundle
        if bundle is None:
            raise ValueError("No prediction available yet")

        if name == 'heuristic':
            if bundle.heuristic is None:
                raise ValueError("No mood history was provided for the heuristic forecast")
            self.state.chart = list(bundle.heuristic.points)
            self.state.model_metrics = None
        else:
            key = bundle.best_model if name == 'best' else name
            forecast = bundle.all_models.get(key)
            if forecast is None:
                raise ValueError(f"Model '{name}' is not available in the current prediction")
            self.state.chart = list(forecast.points)
            self.state.model_metrics = ModelMetrics.from_forecast(
                forecast,
                n_train=bundle.model_metrics.n_train,
                n_test=bundle.model_metrics.n_test,
            )

        self.state.selected_model = name
        logger.debug("prediction_model_selected", model=name)
        return self.state

    async def close(self) -> None:
        close = getattr(self.weather_service, "close", None)
        if close is not None:
            await close()
