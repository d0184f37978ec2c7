"""Call-rate helpers: throttle and debounce.

Both take their notion of time from an injected clock or scheduler so tests
can drive them with :class:`fetch_cache.clock.ManualClock`.
"""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Callable
from typing import Any, Protocol

from fetch_cache.clock import Clock


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's ``call_later`` shape."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


def throttle(
    func: Callable[..., Any],
    limit: float,
    clock: Clock = time.monotonic,
) -> Callable[..., Any]:
    """Let *func* run at most once every *limit* seconds.

    Calls inside the window are dropped and return None.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    last_call: float | None = None

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        nonlocal last_call
        now = clock()
        if last_call is not None and now - last_call < limit:
            return None
        last_call = now
        return func(*args, **kwargs)

    return wrapper


def debounce(
    func: Callable[..., Any],
    wait: float,
    immediate: bool = False,
    scheduler: Scheduler | None = None,
) -> Callable[..., None]:
    """Postpone *func* until *wait* seconds pass without another call.

    Trailing edge by default: the last call's arguments are used once the
    burst ends. With ``immediate=True`` the first call of a burst runs at once
    and the rest of the burst is swallowed.

    Without a *scheduler* the running asyncio loop is used, so the wrapper
    must then be called from inside a coroutine or loop callback.
    """
    if wait < 0:
        raise ValueError(f"wait must be non-negative, got {wait}")
    handle: Cancellable | None = None

    def _later(args: tuple, kwargs: dict) -> None:
        nonlocal handle
        handle = None
        if not immediate:
            func(*args, **kwargs)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        nonlocal handle
        call_now = immediate and handle is None
        if handle is not None:
            handle.cancel()
        sched = scheduler if scheduler is not None else asyncio.get_running_loop()
        handle = sched.call_later(wait, _later, args, kwargs)
        if call_now:
            func(*args, **kwargs)

    def cancel() -> None:
        nonlocal handle
        if handle is not None:
            handle.cancel()
            handle = None

    wrapper.cancel = cancel  # type: ignore[attr-defined]
    return wrapper
