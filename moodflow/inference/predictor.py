"""
Mood Forecast Orchestrator

Runs the full ML pipeline for one forecast request:
1. Generate a fresh synthetic corpus ending today
2. Encode features and targets
3. Chronological 80/20 split
4. Fit linear regression, KNN and decision tree on the training block
5. Evaluate each on the held-out block
6. Encode the 7 forecast days and predict with every model (clamped to [1, 5])
7. Pick the model with the highest held-out R² as the default forecast
8. Assemble the PredictionBundle with explanations

Models are retrained on every call; nothing is cached between requests.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from ..data.corpus import DEFAULT_CORPUS_DAYS, generate_corpus
from ..data.features import encode_corpus, encode_forecast
from ..data.forecast import WeatherForecastDay
from ..data.history import MoodHistory
from ..data.mood_levels import mood_category, mood_level
from ..evaluation.metrics import (
    DEFAULT_TRAIN_RATIO,
    EvaluationResult,
    chronological_split,
    compare_models,
    evaluate_model,
)
from ..models.base import ModelFittingError, TrainedModel
from ..models.knn import DEFAULT_K, fit_knn
from ..models.linear import fit_linear_regression
from ..models.tree import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SAMPLES_SPLIT,
    fit_decision_tree,
)
from .baseline import HeuristicForecast, predict_with_history
from .points import PredictionPoint, average_mood, build_points

logger = logging.getLogger(__name__)

MODEL_ORDER = ('linear', 'knn', 'tree')
MODEL_DISPLAY_NAMES = {
    'linear': 'Linear Regression',
    'knn': 'K-Nearest Neighbors',
    'tree': 'Decision Tree',
}


class PredictionError(Exception):
    """Raised when no forecast can be produced."""


@dataclass
class PredictorConfig:
    """Configuration for the forecast pipeline."""

    corpus_days: int = DEFAULT_CORPUS_DAYS
    train_ratio: float = DEFAULT_TRAIN_RATIO

    knn_k: int = DEFAULT_K
    tree_max_depth: int = DEFAULT_MAX_DEPTH
    tree_min_samples_split: int = DEFAULT_MIN_SAMPLES_SPLIT

    @classmethod
    def from_settings(cls, settings) -> "PredictorConfig":
        return cls(
            corpus_days=settings.corpus_days,
            train_ratio=settings.train_ratio,
            knn_k=settings.knn_k,
            tree_max_depth=settings.tree_max_depth,
            tree_min_samples_split=settings.tree_min_samples_split,
        )


@dataclass(frozen=True)
class ModelForecast:
    """One model's forecast and evaluation."""

    name: str
    display_name: str
    points: List[PredictionPoint]
    evaluation: EvaluationResult
    training_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'display_name': self.display_name,
            'points': [p.to_dict() for p in self.points],
            'metrics': self.evaluation.to_dict(),
            'training_time_ms': self.training_time_ms,
        }


@dataclass(frozen=True)
class ModelMetrics:
    """Quality numbers for the model currently driving the chart."""

    model: str
    model_name: str
    test_r2: float
    test_mse: float
    test_rmse: float
    train_r2: float
    train_mse: float
    training_time_ms: float
    n_train: int
    n_test: int

    @classmethod
    def from_forecast(cls, forecast: ModelForecast, n_train: int, n_test: int) -> "ModelMetrics":
        ev = forecast.evaluation
        return cls(
            model=forecast.name,
            model_name=forecast.display_name,
            test_r2=ev.test_r2,
            test_mse=ev.test_mse,
            test_rmse=ev.test_rmse,
            train_r2=ev.train_r2,
            train_mse=ev.train_mse,
            training_time_ms=forecast.training_time_ms,
            n_train=n_train,
            n_test=n_test,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PredictionBundle:
    """Everything the UI needs to render a mood forecast."""

    points: List[PredictionPoint]
    reasons: List[str]
    baseline: str  # sad | neutral | happy
    model_metrics: ModelMetrics
    all_models: Dict[str, ModelForecast]
    best_model: str
    heuristic: Optional[HeuristicForecast] = None
    failed_models: Dict[str, str] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def best_model_name(self) -> str:
        return self.all_models[self.best_model].display_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'points': [p.to_dict() for p in self.points],
            'reasons': list(self.reasons),
            'baseline': self.baseline,
            'model_metrics': self.model_metrics.to_dict(),
            'all_models': {k: v.to_dict() for k, v in self.all_models.items()},
            'best_model': self.best_model,
            'best_model_name': self.best_model_name,
            'heuristic': self.heuristic.to_dict() if self.heuristic else None,
            'failed_models': dict(self.failed_models),
            'generated_at': self.generated_at.isoformat(),
        }


def model_fitters(config: PredictorConfig) -> Dict[str, Callable[[np.ndarray, np.ndarray], TrainedModel]]:
    """Fit functions keyed by model name, in selection-tie order."""
    return {
        'linear': fit_linear_regression,
        'knn': lambda X, y: fit_knn(X, y, k=config.knn_k),
        'tree': lambda X, y: fit_decision_tree(
            X,
            y,
            max_depth=config.tree_max_depth,
            min_samples_split=config.tree_min_samples_split,
        ),
    }


def select_best_model(all_models: Mapping[str, ModelForecast]) -> str:
    """
    Name of the model with the highest held-out R².

    Ties keep the earlier model; NaN scores never win.
    """
    if not all_models:
        raise PredictionError("No trained model available to select from")

    def score(name: str) -> float:
        r2 = all_models[name].evaluation.test_r2
        return -np.inf if np.isnan(r2) else r2

    best = None
    for name in all_models:
        if best is None or score(name) > score(best):
            best = name
    return best


def build_reasons(
    all_models: Mapping[str, ModelForecast],
    best: str,
    n_train: int,
    n_test: int,
    heuristic: Optional[HeuristicForecast] = None,
    failed_models: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Human-readable explanation of the selected forecast."""
    winner = all_models[best]
    weekly_average = average_mood(winner.points)
    level = mood_level(weekly_average)

    reasons = [
        f"{winner.display_name} selected: best held-out R² "
        f"({winner.evaluation.test_r2:.2f}, RMSE {winner.evaluation.test_rmse:.2f}) "
        f"on the {n_test} most recent of {n_train + n_test} simulated days.",
    ]

    if len(all_models) > 1:
        table = compare_models({f.display_name: f.evaluation for f in all_models.values()})
        comparison = ", ".join(
            f"{row.model} {row.test_r2:.2f}" for row in table.itertuples()
        )
        reasons.append(f"Model comparison (test R²): {comparison}.")

    reasons.append(
        f"Projected weekly average mood: {weekly_average:.2f}/5 "
        f"({level.emoji} {level.label.lower()})."
    )

    if winner.points:
        best_day = max(winner.points, key=lambda p: p.mood)
        worst_day = min(winner.points, key=lambda p: p.mood)
        reasons.append(
            f"Brightest day: {best_day.label} ({best_day.weather.label.lower()}, "
            f"{best_day.temp:.0f}°C); toughest: {worst_day.label} "
            f"({worst_day.weather.label.lower()}, {worst_day.temp:.0f}°C)."
        )

    if heuristic is not None and heuristic.n_entries:
        reasons.append(
            f"Your personal baseline ({heuristic.baseline_mood:.2f} over "
            f"{heuristic.n_entries} logged days) projects "
            f"{average_mood(heuristic.points):.2f}/5 on average."
        )

    for name, error in (failed_models or {}).items():
        reasons.append(f"{MODEL_DISPLAY_NAMES.get(name, name)} could not be trained: {error}")

    return reasons


def assemble_bundle(
    all_models: Mapping[str, ModelForecast],
    n_train: int,
    n_test: int,
    heuristic: Optional[HeuristicForecast] = None,
    failed_models: Optional[Mapping[str, str]] = None,
) -> PredictionBundle:
    """Select the best model and package the result."""
    best = select_best_model(all_models)
    winner = all_models[best]

    logger.info(
        f"Selected {winner.display_name} (test R²={winner.evaluation.test_r2:.4f})"
    )

    return PredictionBundle(
        points=list(winner.points),
        reasons=build_reasons(all_models, best, n_train, n_test, heuristic, failed_models),
        baseline=mood_category(average_mood(winner.points)),
        model_metrics=ModelMetrics.from_forecast(winner, n_train, n_test),
        all_models=dict(all_models),
        best_model=best,
        heuristic=heuristic,
        failed_models=dict(failed_models or {}),
    )


def predict_from_forecast(
    forecast_days: Sequence[WeatherForecastDay],
    today: Optional[date] = None,
    rng: Optional[np.random.Generator] = None,
    history: Optional[MoodHistory] = None,
    config: Optional[PredictorConfig] = None,
) -> PredictionBundle:
    """
    Train all models on a fresh synthetic corpus and forecast mood.

    Args:
        forecast_days: The daily weather forecast (normally 7 days)
        today: Reference date for the corpus window and forecast offsets
        rng: Random source for the corpus; None uses OS entropy
        history: Optional user mood history for the heuristic comparison
        config: Pipeline configuration

    Returns:
        PredictionBundle with the best model's points as the default

    Raises:
        PredictionError: If the forecast is empty or every model fails
    """
    config = config or PredictorConfig()
    today = today or date.today()

    if not forecast_days:
        raise PredictionError("The weather forecast contains no days to predict")

    corpus = generate_corpus(today=today, days=config.corpus_days, rng=rng)
    X, y = encode_corpus(corpus)
    X_train, X_test, y_train, y_test = chronological_split(X, y, config.train_ratio)
    X_forecast = encode_forecast(forecast_days, today)

    logger.info(
        f"Training on {len(y_train)} days, validating on {len(y_test)} days, "
        f"forecasting {len(X_forecast)} days"
    )

    all_models: Dict[str, ModelForecast] = {}
    failed_models: Dict[str, str] = {}

    for name, fit in model_fitters(config).items():
        start = time.perf_counter()
        try:
            model = fit(X_train, y_train)
        except ModelFittingError as e:
            logger.warning(f"{MODEL_DISPLAY_NAMES[name]} failed to fit: {e}")
            failed_models[name] = str(e)
            continue
        training_time_ms = (time.perf_counter() - start) * 1000

        evaluation = evaluate_model(model, X_test, y_test)
        points = build_points(forecast_days, model.predict(X_forecast), today)

        all_models[name] = ModelForecast(
            name=name,
            display_name=model.display_name,
            points=points,
            evaluation=evaluation,
            training_time_ms=round(training_time_ms, 2),
        )

    if not all_models:
        raise PredictionError(
            "No model could be trained: "
            + "; ".join(f"{n}: {e}" for n, e in failed_models.items())
        )

    heuristic = (
        predict_with_history(history, forecast_days, today)
        if history is not None
        else None
    )

    return assemble_bundle(
        all_models,
        n_train=len(y_train),
        n_test=len(y_test),
        heuristic=heuristic,
        failed_models=failed_models,
    )
