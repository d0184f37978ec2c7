"""Cache entry: a stored value plus its insertion timestamp."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """A cached value with metadata."""

    value: Any
    inserted_at: float  # clock reading at set()

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.inserted_at >= ttl
