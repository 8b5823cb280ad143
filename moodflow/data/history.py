"""
User Mood History

The tracker stores one entry per ISO date. Only the heuristic predictor
reads real history; the ML path trains on the synthetic corpus.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

import pandas as pd


@dataclass(frozen=True)
class MoodEntry:
    """A logged mood for one day."""

    mood: int
    note: str = ""
    timestamp: Optional[str] = None


MoodHistory = Mapping[str, MoodEntry]


def history_to_frame(history: MoodHistory) -> pd.DataFrame:
    """
    History as a DataFrame with a sorted DatetimeIndex.

    Columns: mood (float), weekday (0 = Monday).
    """
    if not history:
        return pd.DataFrame(
            {"mood": pd.Series(dtype=float), "weekday": pd.Series(dtype=int)},
            index=pd.DatetimeIndex([], name="date"),
        )

    frame = pd.DataFrame(
        {"mood": [float(entry.mood) for entry in history.values()]},
        index=pd.DatetimeIndex(pd.to_datetime(list(history.keys())), name="date"),
    ).sort_index()
    frame["weekday"] = frame.index.dayofweek
    return frame
