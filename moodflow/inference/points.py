"""Per-day prediction records shared by the ML and heuristic predictors."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..data.forecast import WeatherForecastDay
from ..data.mood_levels import clamp_mood, mood_level
from ..data.weather_codes import WeatherCondition, interpret_weather_code

SHORT_DAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


@dataclass(frozen=True)
class PredictionPoint:
    """One forecast day as rendered on the mood chart."""

    label: str
    date: date
    mood: float
    mood_level: int
    weather: WeatherCondition
    temp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'date': self.date.isoformat(),
            'mood': self.mood,
            'mood_level': self.mood_level,
            'weather': self.weather.to_dict(),
            'temp': self.temp,
        }


def day_label(offset: int, day: date) -> str:
    return 'Today' if offset == 0 else SHORT_DAY_NAMES[day.weekday()]


def build_points(
    days: Sequence[WeatherForecastDay],
    moods: Sequence[float],
    today: Optional[date] = None,
) -> List[PredictionPoint]:
    """
    Pair forecast days with predicted moods.

    Every mood is clamped to [1, 5] and rounded to 2 decimals.
    """
    today = today or date.today()
    points = []
    for offset, (day, raw_mood) in enumerate(zip(days, moods)):
        mood = round(clamp_mood(float(raw_mood)), 2)
        points.append(
            PredictionPoint(
                label=day_label(offset, today + timedelta(days=offset)),
                date=day.date,
                mood=mood,
                mood_level=mood_level(mood).value,
                weather=interpret_weather_code(day.weather_code),
                temp=round(float(day.temp_max), 1),
            )
        )
    return points


def average_mood(points: Sequence[PredictionPoint]) -> float:
    if not points:
        return 0.0
    return float(np.mean([p.mood for p in points]))
