"""
Mood Forecasting from the Weather

This package predicts a user's mood for the next 7 days from the local
weather forecast:

Data:
- Synthetic daily corpus (calendar, weather, temperature -> mood)
- Six-feature encoding shared by training and forecast rows
- Weather code interpretation (label, icon, mood modifier)

Models (hand-written, numpy only):
- Ordinary least squares via Gauss-Jordan inversion
- Distance-weighted KNN with leave-one-out training metrics
- Variance-reduction regression tree

Evaluation:
- Chronological 80/20 split, MSE, RMSE, R²
- Best-model selection by held-out R²

Inference:
- PredictionBundle with every model's forecast and explanations
- Personal-baseline heuristic from the user's logged moods
- PredictionSession for fetching, retraining and switching models
"""

__version__ = "1.0.0"

from .data import MoodEntry, WeatherForecastDay, generate_corpus, interpret_weather_code
from .inference import (
    PredictionBundle,
    PredictionError,
    PredictorConfig,
    predict_from_forecast,
    predict_with_history,
)
from .models import ModelFittingError, SingularMatrixError
from .session import PredictionSession, PredictionState

__all__ = [
    'MoodEntry',
    'WeatherForecastDay',
    'generate_corpus',
    'interpret_weather_code',
    'PredictionBundle',
    'PredictionError',
    'PredictorConfig',
    'predict_from_forecast',
    'predict_with_history',
    'ModelFittingError',
    'SingularMatrixError',
    'PredictionSession',
    'PredictionState',
]
