"""Bounded expiring cache and key helpers."""

from fetch_cache.cache.bounded import BoundedExpiringCache
from fetch_cache.cache.entry import CacheEntry
from fetch_cache.cache.keys import fingerprint, make_key

__all__ = ["BoundedExpiringCache", "CacheEntry", "fingerprint", "make_key"]
