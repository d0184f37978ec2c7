"""CachedFetcher: cache-aside over a BoundedExpiringCache and a coalescer.

Lookup order:
1. cache hit (fresh entry)  -> ("cache")
2. miss -> coalesced producer call, stored on success -> ("live")
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from fetch_cache.cache.bounded import BoundedExpiringCache
from fetch_cache.coalescer import InFlightRequestCoalescer
from fetch_cache.timing import OperationTimer

log = structlog.get_logger("fetch_cache.fetcher")

_MISSING = object()


class CachedFetcher:
    """Serves one data domain.

    Producer calls are timed as ``fetch:<name>``, one record per fetcher, so
    the timer stays bounded however many keys pass through.
    """

    def __init__(
        self,
        cache: BoundedExpiringCache,
        coalescer: InFlightRequestCoalescer | None = None,
        timer: OperationTimer | None = None,
        name: str = "default",
    ) -> None:
        self.cache = cache
        self.coalescer = coalescer if coalescer is not None else InFlightRequestCoalescer()
        self.timer = timer
        self.name = name
        # Bumped by invalidate()/clear(); fetches started before a bump don't store
        self._generation = 0

    @property
    def timing_name(self) -> str:
        return f"fetch:{self.name}"

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
        fresh: bool = False,
    ) -> tuple[Any, str]:
        """Return ``(value, source)`` where source is "cache" or "live".

        ``fresh=True`` bypasses the lookup but still coalesces and stores.
        Failures are not cached and reach every joined caller unchanged.
        A result that settles after ``invalidate``/``clear`` is returned to
        its callers but not written back.
        """
        if not fresh:
            value = self.cache.get(key, _MISSING)
            if value is not _MISSING:
                log.debug("fetch_cache_hit", domain=self.name, key=key)
                return value, "cache"

        log.debug("fetch_cache_miss", domain=self.name, key=key, fresh=fresh)

        async def _fetch_and_store() -> Any:
            generation = self._generation
            try:
                if self.timer is not None:
                    with self.timer.timed(self.timing_name):
                        value = await fetch_fn()
                else:
                    value = await fetch_fn()
            except Exception as exc:
                log.warning("fetch_failed", domain=self.name, key=key, error=repr(exc))
                raise
            if generation == self._generation:
                self.cache.set(key, value)
            else:
                log.debug("fetch_store_skipped", domain=self.name, key=key)
            return value

        value = await self.coalescer.coalesce(key, _fetch_and_store)
        return value, "live"

    def invalidate(self, key: str) -> None:
        self._generation += 1
        self.cache.invalidate(key)

    def clear(self) -> None:
        self._generation += 1
        self.cache.clear()
