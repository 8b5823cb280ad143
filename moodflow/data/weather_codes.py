"""
Weather-Code Interpreter

Maps WMO weather codes (as returned by Open-Meteo) onto a small set of
conditions, each carrying a mood modifier. The same table drives the
synthetic corpus and the live forecast encoding, so a given code always
yields the same modifier at training and inference time.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, Any


@dataclass(frozen=True)
class WeatherCondition:
    """Interpreted weather condition."""

    label: str
    icon: str
    modifier: float  # additive mood effect, roughly [-0.6, 0.6]
    tooltip: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


CLEAR = WeatherCondition("Clear sky", "☀️", 0.6, "Sunshine tends to lift the mood")
PARTLY_CLOUDY = WeatherCondition("Partly cloudy", "🌤️", 0.3, "A few clouds, still bright")
OVERCAST = WeatherCondition("Overcast", "☁️", -0.1, "Grey skies all day")
FOG = WeatherCondition("Fog", "🌫️", -0.2, "Low visibility and damp air")
DRIZZLE = WeatherCondition("Drizzle", "🌦️", -0.2, "Light intermittent rain")
RAIN = WeatherCondition("Moderate rain", "🌧️", -0.4, "Rainy days weigh on the mood")
FREEZING_RAIN = WeatherCondition("Freezing rain", "🌨️", -0.5, "Icy rain, best stay inside")
SNOW = WeatherCondition("Snow", "❄️", -0.3, "Cold and snowy")
THUNDERSTORM = WeatherCondition("Thunderstorm", "⛈️", -0.6, "Stormy weather")
UNKNOWN = WeatherCondition("Unknown", "❔", 0.0, "No weather information for this day")

_CODE_GROUPS = (
    ((0,), CLEAR),
    ((1, 2), PARTLY_CLOUDY),
    ((3,), OVERCAST),
    ((45, 48), FOG),
    ((51, 53, 55, 56, 57), DRIZZLE),
    ((61, 63, 65, 80, 81, 82), RAIN),
    ((66, 67), FREEZING_RAIN),
    ((71, 73, 75, 77, 85, 86), SNOW),
    ((95, 96, 99), THUNDERSTORM),
)

WEATHER_CODES: Dict[int, WeatherCondition] = {
    code: condition for codes, condition in _CODE_GROUPS for code in codes
}


def interpret_weather_code(code: Optional[int]) -> WeatherCondition:
    """Look up a weather code; unknown or missing codes map to a neutral entry."""
    if code is None:
        return UNKNOWN
    try:
        return WEATHER_CODES.get(int(code), UNKNOWN)
    except (TypeError, ValueError):
        return UNKNOWN
