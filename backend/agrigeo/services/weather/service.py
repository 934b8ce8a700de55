"""OpenWeatherMap proxy for current conditions.

Requires ``OPENWEATHER_API_KEY``. Responses are not cached.
"""

import logging
from typing import Any, Optional

import httpx

from agrigeo.models import (
    ConfigurationError,
    UpstreamError,
    WeatherCondition,
    WeatherMain,
    WeatherSummary,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "Delhi"


def _unwrap(value: Any) -> Any:
    """Some OpenWeather mirrors wrap scalars as ``{"value": ...}``."""
    if isinstance(value, dict):
        return value.get("value")
    return value


def normalize_weather_response(data: dict) -> WeatherSummary:
    main = data["main"]
    return WeatherSummary(
        main=WeatherMain(
            temp=_unwrap(main.get("temp")),
            humidity=_unwrap(main.get("humidity")),
        ),
        weather=[
            WeatherCondition(description=_unwrap(w.get("description")))
            for w in data["weather"]
        ],
    )


class OpenWeatherService:
    """OpenWeatherMap current-weather client."""

    WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def get_current(self, location: str = DEFAULT_LOCATION) -> WeatherSummary:
        """Current temperature, humidity and conditions for ``location``.

        Raises:
            ConfigurationError: No API key is configured.
            UpstreamError: OpenWeather answered with a non-success status or
                timed out. ``upstream_status`` carries the status when known.
        """
        if not self._api_key:
            raise ConfigurationError("API key not configured")

        params = {"q": location, "units": "metric", "appid": self._api_key}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self.WEATHER_URL, params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"[WEATHER] OpenWeather timed out for {location}")
            raise UpstreamError("openweather", "request timed out") from e

        if not response.is_success:
            logger.warning(f"[WEATHER] OpenWeather returned {response.status_code} for {location}")
            raise UpstreamError(
                "openweather",
                f"unexpected status {response.status_code}",
                upstream_status=response.status_code,
            )

        return normalize_weather_response(response.json())
