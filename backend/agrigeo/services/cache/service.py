"""Shared cache tier.

The in-process caches are per worker. When several workers serve the same
deployment, a Redis instance can sit behind them so that one worker's
upstream fetch warms the others. The tier is optional and only enabled when
``REDIS_URL`` is configured.

Keys are namespaced per geodata cache: ``geodata:{cache_name}:{key}``.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import redis.asyncio as redis


class CacheService(ABC):
    """Abstract base class for the shared cache tier."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve cached value by key.

        Args:
            key: The cache key to look up.

        Returns:
            The cached value if found, None otherwise.
        """
        pass

    @abstractmethod
    async def get_with_ttl(self, key: str) -> tuple[Any, float] | None:
        """Retrieve a cached value together with its remaining lifetime.

        Args:
            key: The cache key to look up.

        Returns:
            ``(value, remaining_seconds)`` if found, None otherwise.
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store value in cache for ``ttl_seconds``.

        Args:
            key: The cache key to store under.
            value: The value to cache (must be JSON serializable).
            ttl_seconds: Time-to-live in seconds.
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""

    @staticmethod
    def build_geodata_key(cache_name: str, key: str) -> str:
        """Generate the shared-tier key for a geodata cache entry.

        Example:
            >>> CacheService.build_geodata_key("soil", "12.97:77.59")
            'geodata:soil:12.97:77.59'
        """
        return f"geodata:{cache_name}:{key}"


class RedisCacheService(CacheService):
    """Redis-based implementation of the shared cache tier.

    Attributes:
        _client: The Redis async client instance.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        client: Optional[redis.Redis] = None,
        timeout: Optional[float] = 10.0,
    ) -> None:
        self._redis_url = redis_url
        self._client: redis.Redis | None = client
        self._timeout = timeout

    async def connect(self) -> None:
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_timeout=self._timeout,
                socket_connect_timeout=self._timeout,
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> redis.Redis:
        if self._client is None:
            await self.connect()
        return self._client  # type: ignore

    async def get(self, key: str) -> Any | None:
        client = await self._ensure_connected()
        value = await client.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def get_with_ttl(self, key: str) -> tuple[Any, float] | None:
        client = await self._ensure_connected()
        value = await client.get(key)
        if value is None:
            return None
        # -2: key vanished since GET, -1: no expiry (not written by us)
        remaining_ms = await client.pttl(key)
        if remaining_ms <= 0:
            return None
        return json.loads(value), remaining_ms / 1000

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        client = await self._ensure_connected()
        ttl_ms = max(1, int(ttl_seconds * 1000))
        await client.set(key, json.dumps(value), px=ttl_ms)
