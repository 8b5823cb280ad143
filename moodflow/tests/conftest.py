"""
Pytest Configuration and Fixtures for the Mood Forecast Tests

Provides shared fixtures for:
- Seeded random sources and a fixed reference date
- Weather forecasts
- User mood history
- Evaluation results for model selection
"""

from datetime import date, timedelta
from typing import Dict, List

import numpy as np
import pytest

from moodflow.data.forecast import CityForecast, WeatherForecastDay
from moodflow.data.history import MoodEntry


# ============================================================================
# Reference Fixtures
# ============================================================================


@pytest.fixture
def today() -> date:
    """A fixed mid-July Monday, so simulated summers sit inside the corpus."""
    return date(2024, 7, 15)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


# ============================================================================
# Forecast Fixtures
# ============================================================================


def make_forecast_days(
    start: date,
    n_days: int = 7,
    weather_code: int = 0,
    temp_max: float = 20.0,
    temp_min: float = 12.0,
) -> List[WeatherForecastDay]:
    return [
        WeatherForecastDay(
            date=start + timedelta(days=i),
            weather_code=weather_code,
            temp_max=temp_max,
            temp_min=temp_min,
        )
        for i in range(n_days)
    ]


@pytest.fixture
def clear_forecast(today) -> List[WeatherForecastDay]:
    """Seven clear-sky days at a comfortable 20°C."""
    return make_forecast_days(today)


@pytest.fixture
def mixed_forecast(today) -> List[WeatherForecastDay]:
    codes = [0, 2, 3, 61, 95, 71, 45]
    return [
        WeatherForecastDay(
            date=today + timedelta(days=i),
            weather_code=code,
            temp_max=18.0 + i,
            temp_min=10.0 + i,
        )
        for i, code in enumerate(codes)
    ]


@pytest.fixture
def city_forecast(clear_forecast) -> CityForecast:
    return CityForecast(
        city_label="Lyon, France",
        latitude=45.76,
        longitude=4.84,
        timezone="Europe/Paris",
        days=clear_forecast,
    )


# ============================================================================
# History Fixtures
# ============================================================================


@pytest.fixture
def mood_history(today) -> Dict[str, MoodEntry]:
    """
    Six weeks of logged moods: 4 on weekends, 3 on weekdays.
    """
    history = {}
    for offset in range(42):
        day = today - timedelta(days=offset)
        mood = 4 if day.weekday() >= 5 else 3
        history[day.isoformat()] = MoodEntry(mood=mood, note="", timestamp=f"{day.isoformat()}T20:00:00")
    return history


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that run the full training pipeline"
    )
