"""Daily weather forecast records consumed by the predictors."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class WeatherForecastDay:
    """One day of the external 7-day forecast."""

    date: date
    weather_code: Optional[int]
    temp_max: float
    temp_min: float


@dataclass
class CityForecast:
    """Resolved city plus its daily forecast."""

    city_label: str
    latitude: float
    longitude: float
    timezone: str
    days: List[WeatherForecastDay] = field(default_factory=list)
