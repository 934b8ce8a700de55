"""API routes for agrigeo.

Geodata endpoints used by the land listing pages:
- /lands/soil: SoilGrids topsoil properties (cached, SOIL_CACHE_TTL_MS)
- /lands/facilities: Overpass facilities nearby (cached, FACILITIES_CACHE_TTL_MS)
- /weather: OpenWeatherMap current conditions (not cached)
- /crops/suggestions: crops for a soil type

Every failure is answered with ``{"error": "<message>"}``: 400 for bad
input, 502 when the provider fails, 500 for anything unexpected.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from agrigeo.models import (
    ClientInputError,
    ConfigurationError,
    CropSuggestions,
    ErrorResponse,
    FacilitiesResult,
    SoilProperties,
    UpstreamError,
    WeatherSummary,
)
from agrigeo.services import GeodataServices, suggest_crops
from agrigeo.services.weather import DEFAULT_LOCATION

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


def get_geodata_services(request: Request) -> GeodataServices:
    """Services built at application startup."""
    return request.app.state.geodata


@router.get("/lands/soil", response_model=SoilProperties, responses=ERROR_RESPONSES)
async def get_soil(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    lon: Optional[str] = None,
    services: GeodataServices = Depends(get_geodata_services),
):
    """Topsoil pH, clay, sand and silt at a point."""
    try:
        return await services.soil.lookup(lat, lng or lon)
    except ClientInputError as e:
        return error_response(e.status_code, str(e))
    except UpstreamError as e:
        logger.warning(f"[SOIL] Upstream failure: {e}")
        return error_response(e.status_code, "Failed to fetch soil data")
    except Exception:
        logger.exception(f"[SOIL] Unexpected error for {lat},{lng or lon}")
        return error_response(500, "Failed to fetch soil data")


@router.get("/lands/facilities", response_model=FacilitiesResult, responses=ERROR_RESPONSES)
async def get_facilities(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    lon: Optional[str] = None,
    radiusKm: Optional[str] = None,
    services: GeodataServices = Depends(get_geodata_services),
):
    """Marketplaces, fuel, clinics, agricultural shops and rivers nearby."""
    try:
        return await services.facilities.lookup(lat, lng or lon, radiusKm)
    except ClientInputError as e:
        return error_response(e.status_code, str(e))
    except UpstreamError as e:
        logger.warning(f"[FACILITIES] Upstream failure: {e}")
        return error_response(e.status_code, "Failed to fetch facilities")
    except Exception:
        logger.exception(f"[FACILITIES] Unexpected error for {lat},{lng or lon}")
        return error_response(500, "Failed to fetch facilities")


@router.get("/weather", response_model=WeatherSummary, responses=ERROR_RESPONSES)
async def get_weather(
    location: Optional[str] = None,
    services: GeodataServices = Depends(get_geodata_services),
):
    """Current weather for a named location (defaults to Delhi)."""
    try:
        return await services.weather.get_current(location or DEFAULT_LOCATION)
    except ConfigurationError as e:
        return error_response(e.status_code, str(e))
    except UpstreamError as e:
        logger.warning(f"[WEATHER] Upstream failure: {e}")
        return error_response(e.upstream_status or e.status_code, "Failed to fetch weather data")
    except Exception:
        logger.exception(f"[WEATHER] Unexpected error for {location}")
        return error_response(500, "Internal server error")


@router.get("/crops/suggestions", response_model=CropSuggestions, responses=ERROR_RESPONSES)
async def get_crop_suggestions(soilType: Optional[str] = None):
    if not soilType or not soilType.strip():
        return error_response(400, "soilType is required")
    return CropSuggestions(soilType=soilType, crops=suggest_crops(soilType))
