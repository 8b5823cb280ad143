"""
Data layer for mood forecasting: mood scale, weather codes, synthetic
corpus, feature encoding and user history.
"""

from .mood_levels import (
    MOOD_LEVELS,
    MoodLevel,
    clamp_mood,
    mood_category,
    mood_level,
)
from .weather_codes import (
    WEATHER_CODES,
    WeatherCondition,
    interpret_weather_code,
)
from .corpus import (
    DailyObservation,
    corpus_to_frame,
    generate_corpus,
    observation_for_day,
)
from .features import (
    FEATURE_NAMES,
    encode,
    encode_corpus,
    encode_forecast,
    forecast_observations,
)
from .forecast import CityForecast, WeatherForecastDay
from .history import MoodEntry, MoodHistory, history_to_frame

__all__ = [
    'MOOD_LEVELS',
    'MoodLevel',
    'clamp_mood',
    'mood_category',
    'mood_level',
    'WEATHER_CODES',
    'WeatherCondition',
    'interpret_weather_code',
    'DailyObservation',
    'corpus_to_frame',
    'generate_corpus',
    'observation_for_day',
    'FEATURE_NAMES',
    'encode',
    'encode_corpus',
    'encode_forecast',
    'forecast_observations',
    'CityForecast',
    'WeatherForecastDay',
    'MoodEntry',
    'MoodHistory',
    'history_to_frame',
]
