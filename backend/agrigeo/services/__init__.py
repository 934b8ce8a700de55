"""Agrigeo Services.

Service layer components:
- Cache: optional Redis tier shared across workers
- Soil: ISRIC SoilGrids topsoil properties
- Facilities: OpenStreetMap Overpass API for nearby facilities
- Geodata: TTL-cached lookups in front of Soil and Facilities
- Weather: OpenWeatherMap current conditions
- Crops: crop suggestions by soil type
"""

from .cache import CacheService, RedisCacheService
from .soil import SoilGridsService
from .facilities import OverpassFacilitiesService
from .weather import OpenWeatherService
from .crops import suggest_crops
from .geodata import (
    FacilitiesLookupService,
    GeodataCache,
    GeodataServices,
    SoilLookupService,
)

__all__ = [
    # Cache
    "CacheService",
    "RedisCacheService",
    # Providers
    "SoilGridsService",
    "OverpassFacilitiesService",
    "OpenWeatherService",
    # Crops
    "suggest_crops",
    # Geodata lookups
    "FacilitiesLookupService",
    "GeodataCache",
    "GeodataServices",
    "SoilLookupService",
]
