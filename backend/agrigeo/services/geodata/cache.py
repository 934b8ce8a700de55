"""Lookup-or-populate cache in front of a geodata provider.

Each provider gets its own ``GeodataCache`` with an independently configured
TTL. A lookup either returns a value that is no older than the TTL or
fetches a fresh one from the provider and stores it before returning.

Concurrent misses for the same key share one upstream call: the first
caller starts the fetch and registers it as in flight, later callers await
the same task. Failed fetches are never stored, so the next request for the
key tries the provider again.

All mutation of the mapping happens in synchronous steps between awaits,
so no lock is needed under asyncio.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from agrigeo.services.cache import CacheService
from agrigeo.utils.cache import TTLCache

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[Any]]


class GeodataCache:
    """Process-wide memoization layer for one upstream provider.

    Attributes:
        name: Cache name, used in logs and shared-tier keys.
        entries: The local ``TTLCache`` holding normalized payloads.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: Optional[int] = None,
        shared: Optional[CacheService] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self.entries = TTLCache(ttl_seconds=ttl_seconds, max_size=max_entries, clock=clock)
        self._shared = shared
        self._inflight: dict[str, asyncio.Task] = {}
        self._hits = 0
        self._misses = 0
        self._coalesced = 0

    async def get_or_fetch(self, key: str, fetch: Fetch) -> Any:
        """Return the cached value for ``key``, fetching it on a miss.

        Args:
            key: Cache key derived from the request parameters.
            fetch: Zero-argument coroutine factory that calls the provider and
                returns the normalized payload.

        Raises:
            Whatever ``fetch`` raises. Nothing is cached in that case.
        """
        cached = self.entries.get(key)
        if cached is not None:
            self._hits += 1
            logger.debug(f"[CACHE] {self.name} hit {key}")
            return cached

        pending = self._inflight.get(key)
        if pending is not None:
            self._coalesced += 1
            logger.debug(f"[CACHE] {self.name} joining in-flight fetch for {key}")
            return await asyncio.shield(pending)

        self._misses += 1
        logger.debug(f"[CACHE] {self.name} miss {key}")
        task = asyncio.ensure_future(self._populate(key, fetch))
        self._inflight[key] = task
        task.add_done_callback(lambda _: self._inflight.pop(key, None))
        return await asyncio.shield(task)

    async def _populate(self, key: str, fetch: Fetch) -> Any:
        shared_hit = await self._read_shared(key)
        if shared_hit is not None:
            value, remaining = shared_hit
            self.entries.set(key, value, ttl_seconds=remaining)
            return value

        value = await fetch()
        self.entries.set(key, value)
        await self._write_shared(key, value)
        return value

    async def _read_shared(self, key: str) -> tuple[Any, float] | None:
        if self._shared is None:
            return None
        shared_key = CacheService.build_geodata_key(self.name, key)
        try:
            return await self._shared.get_with_ttl(shared_key)
        except Exception as e:
            logger.warning(f"[CACHE] {self.name} shared read failed for {key}: {e}")
            return None

    async def _write_shared(self, key: str, value: Any) -> None:
        if self._shared is None:
            return
        shared_key = CacheService.build_geodata_key(self.name, key)
        try:
            await self._shared.set(shared_key, value, ttl_seconds=self.entries.ttl_seconds)
        except Exception as e:
            logger.warning(f"[CACHE] {self.name} shared write failed for {key}: {e}")

    @property
    def stats(self) -> dict[str, Any]:
        """Lookup counters. ``coalesced`` counts callers served by another caller's fetch."""
        served = self._hits + self._coalesced
        total = served + self._misses
        return {
            "size": len(self.entries),
            "hits": self._hits,
            "misses": self._misses,
            "coalesced": self._coalesced,
            "hit_rate": round(served / total, 3) if total > 0 else 0.0,
            "ttl_seconds": self.entries.ttl_seconds,
        }
