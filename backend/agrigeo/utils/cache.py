"""In-memory TTL cache with optional LRU bound.

Process-level store for geodata responses. Survives across requests in the
same uvicorn worker. Entries are checked for expiry lazily on read; an
expired entry stays resident until it is overwritten or evicted.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class CacheEntry:
    """A single cached value and its absolute expiry (epoch seconds)."""

    key: str
    value: Any
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TTLCache:
    """TTL-aware cache, LRU-evicted when ``max_size`` is set."""

    def __init__(
        self,
        ttl_seconds: float,
        max_size: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._ttl = ttl_seconds
        self._max_size = max_size or None
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        entry = self._cache.get(key)
        if entry is None or not entry.is_valid(self._clock()):
            return None
        self._cache.move_to_end(key)
        return entry.value

    def peek(self, key: str) -> CacheEntry | None:
        """Return the raw entry for ``key`` without checking expiry."""
        return self._cache.get(key)

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> CacheEntry:
        ttl = ttl_seconds if ttl_seconds is not None else self._ttl
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = entry
        if self._max_size is not None and len(self._cache) > self._max_size:
            self._cache.popitem(last=False)
        return entry

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
