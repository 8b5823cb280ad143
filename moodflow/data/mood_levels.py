"""
Mood scale shared by the tracker and the forecast

Five discrete levels (1 = very sad ... 5 = very happy). Continuous model
outputs are rounded onto this scale for display.
"""

from dataclasses import dataclass
from typing import Dict

MIN_MOOD = 1.0
MAX_MOOD = 5.0


@dataclass(frozen=True)
class MoodLevel:
    """Display metadata for one mood level."""

    value: int
    emoji: str
    label: str
    color: str


MOOD_LEVELS: Dict[int, MoodLevel] = {
    1: MoodLevel(1, "😞", "Very sad", "#ff4757"),
    2: MoodLevel(2, "😔", "Sad", "#ff7675"),
    3: MoodLevel(3, "😐", "Neutral", "#fdcb6e"),
    4: MoodLevel(4, "😊", "Happy", "#6c5ce7"),
    5: MoodLevel(5, "😄", "Very happy", "#00b894"),
}


def clamp_mood(value: float) -> float:
    """Clamp a mood value to the [1, 5] scale."""
    return float(min(MAX_MOOD, max(MIN_MOOD, value)))


def mood_level(value: float) -> MoodLevel:
    """Round a continuous mood onto the five-level scale."""
    return MOOD_LEVELS[int(round(clamp_mood(value)))]


def mood_category(average: float) -> str:
    """
    Coarse category of an average mood.

    Returns 'sad' at or below 2.5, 'happy' at or above 4, else 'neutral'.
    """
    if average <= 2.5:
        return "sad"
    if average >= 4:
        return "happy"
    return "neutral"
