"""
Feature Encoder

Maps a DailyObservation onto the fixed 6-dimensional vector shared by every
estimator:

    [weekday/6, month/11, weather_modifier, season_factor,
     (temp_max - 10)/20, day_of_year/365]

The column order is part of the trained models' contract.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .corpus import DailyObservation, observation_for_day
from .forecast import WeatherForecastDay

logger = logging.getLogger(__name__)

FEATURE_NAMES = (
    "weekday",
    "month",
    "weather_modifier",
    "season_factor",
    "temp_max",
    "day_of_year",
)
N_FEATURES = len(FEATURE_NAMES)


def encode(observation: DailyObservation) -> np.ndarray:
    """Encode one observation into its feature vector."""
    return np.array(
        [
            observation.weekday / 6,
            observation.month / 11,
            observation.weather_modifier,
            observation.season_factor,
            (observation.temp_max - 10) / 20,
            observation.day_of_year / 365,
        ],
        dtype=float,
    )


def encode_corpus(corpus: Sequence[DailyObservation]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Encode labelled observations.

    Returns:
        X: (n_samples, 6) feature matrix, rows in corpus order
        y: (n_samples,) mood targets
    """
    if any(obs.mood is None for obs in corpus):
        raise ValueError("Every corpus observation needs a mood target")

    X = np.array([encode(obs) for obs in corpus], dtype=float).reshape(-1, N_FEATURES)
    y = np.array([obs.mood for obs in corpus], dtype=float)
    return X, y


def forecast_observations(
    days: Sequence[WeatherForecastDay],
    today: Optional[date] = None,
) -> List[DailyObservation]:
    """
    Turn forecast days into unlabelled observations.

    The calendar position follows the current offset (today + i) rather than
    the forecast's own date string, so forecast rows line up with the
    corpus, which also ends today.
    """
    today = today or date.today()
    return [
        observation_for_day(
            today + timedelta(days=offset),
            day.weather_code,
            day.temp_max,
            day.temp_min,
        )
        for offset, day in enumerate(days)
    ]


def encode_forecast(
    days: Sequence[WeatherForecastDay],
    today: Optional[date] = None,
) -> np.ndarray:
    """Feature matrix (n_days, 6) for the forecast days."""
    rows = [encode(obs) for obs in forecast_observations(days, today)]
    return np.array(rows, dtype=float).reshape(-1, N_FEATURES)
