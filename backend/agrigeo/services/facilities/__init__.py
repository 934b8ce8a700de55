"""Overpass facilities service."""

from .service import (
    FACILITY_LIMIT,
    OverpassFacilitiesService,
    build_facilities_query,
    normalize_facilities_response,
)

__all__ = [
    "FACILITY_LIMIT",
    "OverpassFacilitiesService",
    "build_facilities_query",
    "normalize_facilities_response",
]
