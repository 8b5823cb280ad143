"""
Mood forecast inference

Provides:
- The ML orchestrator (synthetic corpus -> three models -> best forecast)
- The heuristic predictor based on the user's own history

Usage:
    from moodflow.inference import predict_from_forecast

    bundle = predict_from_forecast(city_forecast.days, history=entries)
    bundle.points          # best model's 7-day forecast
    bundle.all_models      # every model, for switching without retraining
"""

from .points import PredictionPoint, build_points
from .baseline import HeuristicForecast, predict_with_history
from .predictor import (
    MODEL_DISPLAY_NAMES,
    MODEL_ORDER,
    ModelForecast,
    ModelMetrics,
    PredictionBundle,
    PredictionError,
    PredictorConfig,
    assemble_bundle,
    predict_from_forecast,
    select_best_model,
)

__all__ = [
    'PredictionPoint',
    'build_points',
    'HeuristicForecast',
    'predict_with_history',
    'MODEL_DISPLAY_NAMES',
    'MODEL_ORDER',
    'ModelForecast',
    'ModelMetrics',
    'PredictionBundle',
    'PredictionError',
    'PredictorConfig',
    'assemble_bundle',
    'predict_from_forecast',
    'select_best_model',
]
