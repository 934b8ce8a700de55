"""Cached geodata lookups.

Ties each upstream provider to its ``GeodataCache`` and owns the request
validation and cache-key derivation. Coordinates are kept as the strings the
client sent: ``12.9`` and ``12.90`` are different keys and are not rounded
into a shared bucket.

``GeodataServices`` is built once when the application is created and
handed to route handlers through FastAPI dependencies.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from agrigeo.config import Settings
from agrigeo.models import ClientInputError
from agrigeo.services.cache import CacheService, RedisCacheService
from agrigeo.services.facilities import OverpassFacilitiesService
from agrigeo.services.geodata.cache import GeodataCache
from agrigeo.services.soil import SoilGridsService
from agrigeo.services.weather import OpenWeatherService

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = "3"


def require_coordinates(lat: Optional[str], lng: Optional[str]) -> tuple[str, str]:
    """Return (lat, lng) or raise if either is missing or empty."""
    if not lat or not lng:
        raise ClientInputError("lat and lng are required")
    return lat, lng


def parse_radius_km(radius_km: Optional[str]) -> tuple[str, float]:
    """Return the radius as sent (for the cache key) and as a number."""
    raw = radius_km or DEFAULT_RADIUS_KM
    try:
        value = float(raw)
    except ValueError:
        raise ClientInputError("radiusKm must be a number") from None
    if not math.isfinite(value) or value <= 0:
        raise ClientInputError("radiusKm must be a number")
    return raw, value


class SoilLookupService:
    """Soil properties at a point, cached per (lat, lng)."""

    def __init__(self, provider: SoilGridsService, cache: GeodataCache) -> None:
        self.provider = provider
        self.cache = cache

    @staticmethod
    def cache_key(lat: str, lng: str) -> str:
        return f"{lat}:{lng}"

    async def lookup(self, lat: Optional[str], lng: Optional[str]) -> dict[str, Any]:
        lat, lng = require_coordinates(lat, lng)

        async def fetch() -> dict[str, Any]:
            soil = await self.provider.fetch_properties(lat, lng)
            return soil.model_dump()

        return await self.cache.get_or_fetch(self.cache_key(lat, lng), fetch)


class FacilitiesLookupService:
    """Facilities around a point, cached per (lat, lng, radius)."""

    def __init__(self, provider: OverpassFacilitiesService, cache: GeodataCache) -> None:
        self.provider = provider
        self.cache = cache

    @staticmethod
    def cache_key(lat: str, lng: str, radius_km: str) -> str:
        return f"{lat}:{lng}:{radius_km}"

    async def lookup(
        self,
        lat: Optional[str],
        lng: Optional[str],
        radius_km: Optional[str] = DEFAULT_RADIUS_KM,
    ) -> dict[str, Any]:
        lat, lng = require_coordinates(lat, lng)
        radius_raw, radius_value = parse_radius_km(radius_km)

        async def fetch() -> dict[str, Any]:
            result = await self.provider.fetch_facilities(lat, lng, radius_value)
            return result.model_dump()

        return await self.cache.get_or_fetch(self.cache_key(lat, lng, radius_raw), fetch)


@dataclass
class GeodataServices:
    """Every service a request handler needs, built once per application."""

    soil: SoilLookupService
    facilities: FacilitiesLookupService
    weather: OpenWeatherService
    shared_cache: Optional[CacheService] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        shared_cache: Optional[CacheService] = None,
    ) -> "GeodataServices":
        """Wire providers and caches from ``settings``.

        Args:
            settings: Application settings.
            transport: httpx transport for every provider (tests pass a
                ``httpx.MockTransport``).
            shared_cache: Overrides the Redis tier built from ``REDIS_URL``.
        """
        if shared_cache is None and settings.redis_url:
            shared_cache = RedisCacheService(
                settings.redis_url, timeout=settings.upstream_timeout_seconds
            )
            logger.info("[CACHE] Shared Redis tier enabled")

        max_entries = settings.geodata_cache_max_entries or None
        timeout = settings.upstream_timeout_seconds

        soil_cache = GeodataCache(
            "soil",
            ttl_seconds=settings.soil_cache_ttl_seconds,
            max_entries=max_entries,
            shared=shared_cache,
        )
        facilities_cache = GeodataCache(
            "facilities",
            ttl_seconds=settings.facilities_cache_ttl_seconds,
            max_entries=max_entries,
            shared=shared_cache,
        )

        return cls(
            soil=SoilLookupService(SoilGridsService(timeout=timeout, transport=transport), soil_cache),
            facilities=FacilitiesLookupService(
                OverpassFacilitiesService(timeout=timeout, transport=transport),
                facilities_cache,
            ),
            weather=OpenWeatherService(
                api_key=settings.openweather_api_key,
                timeout=timeout,
                transport=transport,
            ),
            shared_cache=shared_cache,
        )

    async def close(self) -> None:
        if self.shared_cache is not None:
            await self.shared_cache.close()

    def cache_stats(self) -> dict[str, dict[str, Any]]:
        return {
            "soil": self.soil.cache.stats,
            "facilities": self.facilities.cache.stats,
        }
