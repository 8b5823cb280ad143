"""
Open-Meteo Integration for the Mood Forecast

Two sequential calls per request:
1. Geocoding: city name -> coordinates and timezone
2. Forecast: coordinates -> 7 days of weather code and min/max temperature

No API key is required. Failures are not retried; each failure mode maps
to its own exception with a user-facing message.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import httpx
import structlog

from ..data.forecast import CityForecast, WeatherForecastDay

logger = structlog.get_logger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DAILY_FIELDS = "weathercode,temperature_2m_max,temperature_2m_min"


class WeatherServiceError(Exception):
    """Base exception for forecast retrieval errors"""

    def __init__(self, message: str, city: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.city = city


class InvalidCityError(WeatherServiceError):
    """Raised before any request when the city name is empty"""

    def __init__(self):
        super().__init__("Please enter a city name to run the prediction")


class CityNotFoundError(WeatherServiceError):
    """Raised when geocoding returns no match"""

    def __init__(self, city: str):
        super().__init__(f"City not found: {city}", city=city)


class ForecastUnavailableError(WeatherServiceError):
    """Raised on network, HTTP or malformed-response failures at either stage"""

    def __init__(self, stage: str, city: Optional[str] = None, status_code: Optional[int] = None):
        detail = f" (HTTP {status_code})" if status_code else ""
        super().__init__(
            f"Weather service unavailable during {stage}{detail}, please try again later",
            city=city,
        )
        self.stage = stage
        self.status_code = status_code


class EmptyForecastError(WeatherServiceError):
    """Raised when the forecast payload has no usable daily rows"""

    def __init__(self, city: Optional[str] = None):
        super().__init__(f"No forecast data available for {city or 'this location'}", city=city)


def validate_city(city: Optional[str]) -> str:
    """Strip the city name, rejecting empty input."""
    cleaned = (city or "").strip()
    if not cleaned:
        raise InvalidCityError()
    return cleaned


def parse_daily_forecast(payload: Dict[str, Any], limit: Optional[int] = None) -> List[WeatherForecastDay]:
    """
    Parse Open-Meteo's column-oriented ``daily`` block into rows.

    Rows missing a date, weather code or temperature are skipped.

    Raises:
        ValueError: A present value cannot be converted (bad date or number)
    """
    daily = payload.get("daily") or {}
    times = daily.get("time") or []
    codes = daily.get("weathercode") or daily.get("weather_code") or []
    maxima = daily.get("temperature_2m_max") or []
    minima = daily.get("temperature_2m_min") or []

    days = []
    for i, iso in enumerate(times):
        code = codes[i] if i < len(codes) else None
        temp_max = maxima[i] if i < len(maxima) else None
        temp_min = minima[i] if i < len(minima) else None
        if iso is None or code is None or temp_max is None or temp_min is None:
            continue
        days.append(
            WeatherForecastDay(
                date=date.fromisoformat(iso),
                weather_code=int(code),
                temp_max=float(temp_max),
                temp_min=float(temp_min),
            )
        )

    return days[:limit] if limit else days


class WeatherService:
    """
    Async client for the Open-Meteo geocoding and forecast APIs.

    Usage:
        async with WeatherService() as service:
            forecast = await service.fetch_city_forecast("Lyon")
    """

    def __init__(
        self,
        geocoding_url: str = GEOCODING_URL,
        forecast_url: str = FORECAST_URL,
        timeout: float = 10.0,
        language: str = "fr",
        forecast_days: int = 7,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self.language = language
        self.forecast_days = forecast_days
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "WeatherService":
        return cls(
            geocoding_url=settings.geocoding_url,
            forecast_url=settings.forecast_url,
            timeout=settings.http_timeout_seconds,
            language=settings.language,
            forecast_days=settings.forecast_days,
            transport=transport,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _get_json(self, url: str, params: Dict[str, Any], stage: str, city: str) -> Dict[str, Any]:
        client = await self._get_client()
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return data
        except httpx.HTTPStatusError as e:
            logger.warning(
                "weather_request_failed",
                stage=stage,
                city=city,
                status_code=e.response.status_code,
            )
            raise ForecastUnavailableError(stage, city, e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("weather_request_failed", stage=stage, city=city, error=str(e))
            raise ForecastUnavailableError(stage, city) from e

    async def geocode(self, city: str) -> Dict[str, Any]:
        """
        Resolve a city name to its best geocoding match.

        Raises:
            InvalidCityError: Empty city name
            CityNotFoundError: No result
            ForecastUnavailableError: Network, HTTP or malformed-response failure
        """
        city = validate_city(city)
        data = await self._get_json(
            self.geocoding_url,
            {"name": city, "count": 1, "language": self.language, "format": "json"},
            stage="geocoding",
            city=city,
        )

        results = data.get("results") or []
        if not results:
            logger.info("city_not_found", city=city)
            raise CityNotFoundError(city)
        if not isinstance(results, list) or not isinstance(results[0], dict):
            logger.warning("geocoding_malformed", city=city)
            raise ForecastUnavailableError("geocoding", city)
        return results[0]

    async def fetch_city_forecast(self, city: str) -> CityForecast:
        """
        Geocode a city then fetch its daily forecast.

        Returns:
            CityForecast with up to ``forecast_days`` days

        Raises:
            WeatherServiceError: Any of its subclasses, per failure mode
        """
        city = validate_city(city)
        place = await self.geocode(city)
        try:
            latitude = float(place["latitude"])
            longitude = float(place["longitude"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("geocoding_malformed", city=city, error=str(e))
            raise ForecastUnavailableError("geocoding", city) from e

        payload = await self._get_json(
            self.forecast_url,
            {
                "latitude": latitude,
                "longitude": longitude,
                "timezone": place.get("timezone") or "auto",
                "daily": DAILY_FIELDS,
                "forecast_days": self.forecast_days,
            },
            stage="forecast",
            city=city,
        )

        try:
            days = parse_daily_forecast(payload, limit=self.forecast_days)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("forecast_malformed", city=city, error=str(e))
            raise ForecastUnavailableError("forecast", city) from e
        if not days:
            logger.info("forecast_empty", city=city)
            raise EmptyForecastError(city)

        label = ", ".join(part for part in (place.get("name"), place.get("country")) if part)
        forecast = CityForecast(
            city_label=label or city,
            latitude=latitude,
            longitude=longitude,
            timezone=place.get("timezone") or "auto",
            days=days,
        )
        logger.info("forecast_fetched", city=forecast.city_label, days=len(days))
        return forecast
