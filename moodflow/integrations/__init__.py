"""
External service integrations.
"""

from .weather_service import (
    CityNotFoundError,
    EmptyForecastError,
    ForecastUnavailableError,
    InvalidCityError,
    WeatherService,
    WeatherServiceError,
    parse_daily_forecast,
    validate_city,
)

__all__ = [
    'CityNotFoundError',
    'EmptyForecastError',
    'ForecastUnavailableError',
    'InvalidCityError',
    'WeatherService',
    'WeatherServiceError',
    'parse_daily_forecast',
    'validate_city',
]
