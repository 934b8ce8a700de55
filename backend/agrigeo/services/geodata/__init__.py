"""Cached geodata lookups (soil properties, nearby facilities)."""

from .cache import GeodataCache
from .service import (
    DEFAULT_RADIUS_KM,
    FacilitiesLookupService,
    GeodataServices,
    SoilLookupService,
    parse_radius_km,
    require_coordinates,
)

__all__ = [
    "DEFAULT_RADIUS_KM",
    "FacilitiesLookupService",
    "GeodataCache",
    "GeodataServices",
    "SoilLookupService",
    "parse_radius_km",
    "require_coordinates",
]
