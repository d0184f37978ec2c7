"""Single-flight request coalescer.

Concurrent identical requests (same key) share one upstream call instead of
each making their own. The first caller starts the operation as an
asyncio.Task; later callers await that same task until it settles.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

log = structlog.get_logger("fetch_cache.coalescer")


class InFlightRequestCoalescer:
    """At most one pending operation per key.

    Registration happens synchronously before the first ``await``, so on a
    single event loop two callers for the same key can never both start the
    operation. No locking: do not share an instance across threads.
    """

    def __init__(self) -> None:
        self._in_flight: dict[str, asyncio.Future] = {}

    async def coalesce(self, key: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Run *operation* for *key*, or join the one already running.

        Every caller joined to the same run gets the same result, or the same
        exception object if it fails. The registration is dropped once the
        operation settles, so the next call starts a fresh run.

        Cancelling a caller only abandons its wait; the shared operation keeps
        running for everyone else.
        """
        pending = self._in_flight.get(key)
        if pending is not None:
            log.debug("coalesce_joined", key=key)
            return await asyncio.shield(pending)

        if not callable(operation):
            raise TypeError(f"operation for {key!r} must be callable, got {type(operation).__name__}")

        task = asyncio.ensure_future(self._run(key, operation))
        self._in_flight[key] = task
        log.debug("coalesce_started", key=key)
        return await asyncio.shield(task)

    async def _run(self, key: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await operation()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def is_pending(self, key: str) -> bool:
        return key in self._in_flight

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)
