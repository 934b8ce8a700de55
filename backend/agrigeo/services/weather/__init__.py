"""OpenWeatherMap weather service."""

from .service import DEFAULT_LOCATION, OpenWeatherService, normalize_weather_response

__all__ = ["DEFAULT_LOCATION", "OpenWeatherService", "normalize_weather_response"]
