"""
Baseline / Seasonal Heuristic Predictor

Non-ML forecast built from the user's own logged moods:

    mood(day) = baseline + weekday_offset(day) + weather_modifier(day)

- baseline: mean mood over the trailing 30 days, or over the whole history
  when that window holds fewer than 5 entries
- weekday_offset: that weekday's historical mean minus the baseline
  (0 for weekdays never logged)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..data.forecast import WeatherForecastDay
from ..data.history import MoodHistory, history_to_frame
from ..data.weather_codes import interpret_weather_code
from .points import PredictionPoint, build_points

logger = logging.getLogger(__name__)

WINDOW_DAYS = 30
MIN_WINDOW_ENTRIES = 5
NEUTRAL_MOOD = 3.0


@dataclass(frozen=True)
class HeuristicForecast:
    """Output of the heuristic predictor."""

    points: List[PredictionPoint]
    baseline_mood: float
    weekday_offsets: Dict[int, float] = field(default_factory=dict)
    n_entries: int = 0
    name: str = field(default="heuristic", init=False)
    display_name: str = field(default="Personal baseline", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'display_name': self.display_name,
            'points': [p.to_dict() for p in self.points],
            'baseline_mood': self.baseline_mood,
            'weekday_offsets': {str(k): v for k, v in self.weekday_offsets.items()},
            'n_entries': self.n_entries,
        }


def compute_baseline(
    frame: pd.DataFrame,
    today: date,
    window_days: int = WINDOW_DAYS,
    min_entries: int = MIN_WINDOW_ENTRIES,
) -> float:
    """Mean mood of the trailing window, falling back to the whole history."""
    if frame.empty:
        return NEUTRAL_MOOD

    start = pd.Timestamp(today - timedelta(days=window_days - 1))
    end = pd.Timestamp(today)
    window = frame.loc[(frame.index >= start) & (frame.index <= end), 'mood']

    if len(window) >= min_entries:
        return float(window.mean())
    return float(frame['mood'].mean())


def compute_weekday_offsets(frame: pd.DataFrame, baseline: float) -> Dict[int, float]:
    """Per-weekday mean minus the baseline, for weekdays present in history."""
    if frame.empty:
        return {}
    means = frame.groupby('weekday')['mood'].mean()
    return {int(weekday): float(mean - baseline) for weekday, mean in means.items()}


def predict_with_history(
    history: MoodHistory,
    days: Sequence[WeatherForecastDay],
    today: Optional[date] = None,
    window_days: int = WINDOW_DAYS,
    min_entries: int = MIN_WINDOW_ENTRIES,
) -> HeuristicForecast:
    """
    Project the user's own mood pattern onto the forecast days.

    Forecast day i is taken as today + i for its weekday.
    """
    today = today or date.today()
    frame = history_to_frame(history)

    baseline = compute_baseline(frame, today, window_days, min_entries)
    offsets = compute_weekday_offsets(frame, baseline)

    moods = []
    for offset, day in enumerate(days):
        weekday = (today + timedelta(days=offset)).weekday()
        moods.append(
            baseline
            + offsets.get(weekday, 0.0)
            + interpret_weather_code(day.weather_code).modifier
        )

    logger.info(
        f"Heuristic forecast from {len(frame)} entries (baseline={baseline:.2f})"
    )
    return HeuristicForecast(
        points=build_points(days, moods, today),
        baseline_mood=round(baseline, 2),
        weekday_offsets=offsets,
        n_entries=len(frame),
    )
