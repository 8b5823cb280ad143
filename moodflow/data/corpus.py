"""
Synthetic Training Corpus

Real mood history carries no weather covariates, so the models are trained
on a simulated corpus instead: one labelled observation per day over a
trailing window ending today, combining:
- Calendar position (weekday, month, day of year)
- Season-dependent simulated weather
- A formula-driven mood target with injected noise

Randomness comes from an injectable numpy Generator so tests can seed it.
"""

import math
import logging
from dataclasses import dataclass, asdict, replace
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .mood_levels import clamp_mood
from .weather_codes import interpret_weather_code

logger = logging.getLogger(__name__)

DEFAULT_CORPUS_DAYS = 500
BASE_MOOD = 3.5
WEATHER_WEIGHT = 1.5
MOOD_NOISE = 0.3
TEMP_COMFORT_C = 20.0
TEMP_PENALTY_PER_DEGREE = 0.03
MONTHLY_WAVE_AMPLITUDE = 0.1

# Monday = 0 ... Sunday = 6
WEEKDAY_EFFECT = (-0.2, -0.1, 0.0, 0.05, 0.2, 0.4, 0.3)

# January = 0 ... December = 11
MONTH_EFFECT = (-0.3, -0.25, -0.1, 0.05, 0.15, 0.25, 0.3, 0.3, 0.1, -0.05, -0.2, -0.3)

SUMMER_MONTHS = frozenset({5, 6, 7})
WINTER_MONTHS = frozenset({11, 0, 1})

# (weather code, probability) bands, consumed by a single uniform draw
SUMMER_WEATHER = ((0, 0.40), (2, 0.30), (3, 0.10), (61, 0.12), (95, 0.08))
WINTER_WEATHER = ((0, 0.15), (2, 0.15), (3, 0.25), (61, 0.20), (71, 0.15), (45, 0.10))
SHOULDER_WEATHER = ((0, 0.25), (2, 0.25), (3, 0.20), (51, 0.10), (61, 0.15), (45, 0.05))


@dataclass(frozen=True)
class DailyObservation:
    """One day of calendar, weather and (for training rows) mood data."""

    date: date
    weekday: int  # 0-6, Monday first
    month: int  # 0-11
    day_of_year: int  # 0-365
    weather_code: Optional[int]
    weather_modifier: float
    season_factor: float  # [-1, 1]
    temp_max: float
    temp_min: float
    mood: Optional[float] = None  # regression target, None for forecast rows

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


def season_factor(day_of_year: int) -> float:
    """Sinusoid over the year, peaking near the June solstice."""
    return math.sin(2 * math.pi * (day_of_year - 80) / 365)


def seasonal_amplitude(month: int) -> float:
    """-1 in January, +1 in July."""
    return -math.cos(2 * math.pi * month / 12)


def calendar_position(day: date) -> Tuple[int, int, int]:
    """Return (weekday, month, day_of_year) using zero-based indices."""
    return day.weekday(), day.month - 1, day.timetuple().tm_yday - 1


def observation_for_day(
    day: date,
    weather_code: Optional[int],
    temp_max: float,
    temp_min: float,
    mood: Optional[float] = None,
) -> DailyObservation:
    """
    Build an observation from a date and its weather.

    Used for both simulated corpus rows and live forecast days so the
    calendar and weather fields are derived identically.
    """
    weekday, month, day_of_year = calendar_position(day)
    return DailyObservation(
        date=day,
        weekday=weekday,
        month=month,
        day_of_year=day_of_year,
        weather_code=weather_code,
        weather_modifier=interpret_weather_code(weather_code).modifier,
        season_factor=season_factor(day_of_year),
        temp_max=float(temp_max),
        temp_min=float(temp_min),
        mood=mood,
    )


def weather_bands(month: int) -> Sequence[Tuple[int, float]]:
    """Probability bands for the season containing ``month``."""
    if month in SUMMER_MONTHS:
        return SUMMER_WEATHER
    if month in WINTER_MONTHS:
        return WINTER_WEATHER
    return SHOULDER_WEATHER


def sample_weather_code(month: int, rng: np.random.Generator) -> int:
    """Pick a weather code by partitioning one uniform draw into bands."""
    draw = rng.random()
    cumulative = 0.0
    bands = weather_bands(month)
    for code, probability in bands:
        cumulative += probability
        if draw < cumulative:
            return code
    return bands[-1][0]


def simulate_mood(
    weekday: int,
    month: int,
    weather_modifier: float,
    temp_max: float,
    rng: np.random.Generator,
) -> float:
    """Mood target for one simulated day, clamped to [1, 5] and rounded."""
    mood = (
        BASE_MOOD
        + WEEKDAY_EFFECT[weekday]
        + MONTH_EFFECT[month]
        + weather_modifier * WEATHER_WEIGHT
        + rng.uniform(-MOOD_NOISE, MOOD_NOISE)
        + MONTHLY_WAVE_AMPLITUDE * math.sin(2 * math.pi * month / 12)
        - TEMP_PENALTY_PER_DEGREE * abs(temp_max - TEMP_COMFORT_C)
    )
    return round(clamp_mood(mood), 2)


def generate_corpus(
    today: Optional[date] = None,
    days: int = DEFAULT_CORPUS_DAYS,
    rng: Optional[np.random.Generator] = None,
) -> List[DailyObservation]:
    """
    Generate a chronological synthetic corpus.

    Args:
        today: Last day of the window (default: the current date)
        days: Number of days before ``today`` to cover; yields ``days + 1`` rows
        rng: Random source; ``None`` uses fresh OS entropy

    Returns:
        Observations ordered oldest first, exactly one per date
    """
    today = today or date.today()
    rng = rng if rng is not None else np.random.default_rng()

    corpus = []
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        _, month, _ = calendar_position(day)

        code = sample_weather_code(month, rng)
        temp_max = 15 + seasonal_amplitude(month) * 10 + rng.uniform(-3, 3)
        temp_min = temp_max - 5 - rng.uniform(0, 3)

        observation = observation_for_day(
            day, code, round(temp_max, 1), round(temp_min, 1)
        )
        mood = simulate_mood(
            observation.weekday,
            observation.month,
            observation.weather_modifier,
            observation.temp_max,
            rng,
        )
        corpus.append(replace(observation, mood=mood))

    logger.info(f"Generated synthetic corpus of {len(corpus)} days ending {today}")
    return corpus


def corpus_to_frame(corpus: Sequence[DailyObservation]) -> pd.DataFrame:
    """Corpus as a DataFrame indexed by date, for inspection and statistics."""
    frame = pd.DataFrame([asdict(obs) for obs in corpus])
    if frame.empty:
        return frame
    frame["date"] = pd.to_datetime(frame["date"])
    return frame.set_index("date")
