"""Data models for agrigeo."""

from .core import (
    SOIL_SOURCE,
    CropSuggestions,
    FacilitiesResult,
    Facility,
    SoilProperties,
    WeatherCondition,
    WeatherMain,
    WeatherSummary,
)
from .errors import (
    ClientInputError,
    ConfigurationError,
    ErrorResponse,
    GeodataError,
    UpstreamError,
)

__all__ = [
    # Payloads
    "SOIL_SOURCE",
    "CropSuggestions",
    "FacilitiesResult",
    "Facility",
    "SoilProperties",
    "WeatherCondition",
    "WeatherMain",
    "WeatherSummary",
    # Errors
    "ClientInputError",
    "ConfigurationError",
    "ErrorResponse",
    "GeodataError",
    "UpstreamError",
]
