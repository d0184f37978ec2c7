"""In-memory request caching and coalescing."""

from fetch_cache.cache import BoundedExpiringCache, CacheEntry, fingerprint, make_key
from fetch_cache.clock import Clock, ManualClock
from fetch_cache.coalescer import InFlightRequestCoalescer
from fetch_cache.container import CacheContainer
from fetch_cache.fetcher import CachedFetcher
from fetch_cache.timing import OperationTimer, TimingRecord

__version__ = "0.1.0"

__all__ = [
    "BoundedExpiringCache",
    "CacheEntry",
    "CacheContainer",
    "CachedFetcher",
    "Clock",
    "InFlightRequestCoalescer",
    "ManualClock",
    "OperationTimer",
    "TimingRecord",
    "fingerprint",
    "make_key",
]
