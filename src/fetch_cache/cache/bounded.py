"""Capacity-bounded TTL cache with FIFO eviction."""

from __future__ import annotations

import math
import time
from collections import OrderedDict
from typing import Any

import structlog

from fetch_cache.cache.entry import CacheEntry
from fetch_cache.clock import Clock

log = structlog.get_logger("fetch_cache.cache")

_MISSING = object()


class BoundedExpiringCache:
    """Insertion-ordered dict + clock TTL cache.

    Holds at most ``capacity`` entries. When a new key arrives and the cache is
    full, the oldest-inserted entry is dropped (FIFO, reads do not reorder).
    Entries older than ``ttl`` seconds are treated as absent and removed when
    read; there is no background sweep, so ``size()`` may still count them.

    Not thread-safe: meant to be shared by coroutines on a single event loop.
    """

    def __init__(
        self,
        capacity: int = 100,
        ttl: float = 300.0,
        clock: Clock = time.monotonic,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if not (ttl > 0 and math.isfinite(ttl)):
            raise ValueError(f"ttl must be a positive finite number, got {ttl}")
        self._capacity = capacity
        self._ttl = float(ttl)
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl(self) -> float:
        return self._ttl

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, evicting the oldest entry if full."""
        if key in self._entries:
            # Re-insert counts as a new insertion for eviction order
            del self._entries[key]
        elif len(self._entries) >= self._capacity:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("cache_evicted", key=evicted, capacity=self._capacity)
        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock())

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or *default* if missing / expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.is_expired(self._clock(), self._ttl):
            del self._entries[key]
            log.debug("cache_expired", key=key)
            return default
        return entry.value

    def has(self, key: str) -> bool:
        """Presence check with the same expiry rule as :meth:`get`."""
        return self.get(key, _MISSING) is not _MISSING

    def invalidate(self, key: str) -> None:
        """Remove a single key (no-op if absent)."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def size(self) -> int:
        """Stored entry count, including expired entries not yet read."""
        return len(self._entries)

    def keys(self) -> list[str]:
        """Stored keys, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, ttl={self._ttl}, "
            f"size={len(self._entries)})"
        )
