"""Clock and scheduler abstractions: real monotonic time or a manual virtual clock."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from typing import Any

# Any zero-arg callable returning seconds, e.g. time.monotonic
Clock = Callable[[], float]


class ScheduledCall:
    """Handle for a callback registered with :meth:`ManualClock.call_later`."""

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple) -> None:
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        if not self._cancelled:
            self._callback(*self._args)


class ManualClock:
    """Virtual clock that only moves when told to.

    Callable like ``time.monotonic`` and exposes ``call_later`` with the same
    shape as an asyncio event loop, so it can stand in for both the clock and
    the scheduler in tests.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()

    def __call__(self) -> float:
        return self._now

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move time forward by *seconds*, firing callbacks that fall due."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards: {seconds}")
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            self._now = when
            call._run()
        self._now = target

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        call = ScheduledCall(self._now + max(delay, 0.0), callback, args)
        heapq.heappush(self._queue, (call.when, next(self._seq), call))
        return call

    @property
    def pending_calls(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled())
