"""Cache key builders."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def fingerprint(*args: Any, **kwargs: Any) -> str:
    """Serialize call arguments into a stable string.

    Dict keys are sorted so ``{"a": 1, "b": 2}`` and ``{"b": 2, "a": 1}``
    produce the same fingerprint. Non-JSON values fall back to ``str()``.
    """
    payload: Any = list(args)
    if kwargs:
        payload = [payload, kwargs]
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


def make_key(prefix: str, *parts: Any) -> str:
    """Build a cache key. Multiple parts are hashed as a JSON list with sha256.

    Encoding the parts as a list keeps ("a|b", "c") and ("a", "b|c") apart.
    """
    if len(parts) > 1:
        raw = json.dumps([str(p) for p in parts], separators=(",", ":"))
        hashed = hashlib.sha256(raw.encode()).hexdigest()
        return f"{prefix}:v1:{hashed}"
    raw = "".join(str(p) for p in parts)
    return f"{prefix}:v1:{raw}"
