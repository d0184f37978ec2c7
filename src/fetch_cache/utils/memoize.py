"""Argument-fingerprint memoization."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from fetch_cache.cache.keys import fingerprint


def memoize(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Cache *fn* results keyed by the JSON fingerprint of its arguments.

    Unlike ``functools.lru_cache`` the arguments need not be hashable, only
    serializable. The cache is unbounded; use ``cache_clear()`` to reset it.
    """
    results: dict[str, Any] = {}

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        key = fingerprint(*args, **kwargs)
        if key in results:
            return results[key]
        result = fn(*args, **kwargs)
        results[key] = result
        return result

    wrapper.cache_clear = results.clear  # type: ignore[attr-defined]
    wrapper.cache_size = results.__len__  # type: ignore[attr-defined]
    return wrapper
