"""Shared (cross-worker) cache tier backed by Redis."""

from .service import CacheService, RedisCacheService

__all__ = ["CacheService", "RedisCacheService"]
