"""Function helpers for memoizing, throttling and debouncing calls."""

from fetch_cache.utils.memoize import memoize
from fetch_cache.utils.rate import debounce, throttle

__all__ = ["debounce", "memoize", "throttle"]
