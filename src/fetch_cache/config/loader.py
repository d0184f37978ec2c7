"""Config loader: reads YAML, applies FETCH_CACHE_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from fetch_cache.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        FETCH_CACHE_LOG_LEVEL         -> logging.level
        FETCH_CACHE_LOG_FORMAT        -> logging.format
        FETCH_CACHE_DEFAULT_CAPACITY  -> default_cache.capacity
        FETCH_CACHE_DEFAULT_TTL       -> default_cache.ttl_seconds
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    # Apply env var overrides
    log_level = os.environ.get("FETCH_CACHE_LOG_LEVEL")
    if log_level:
        data.setdefault("logging", {})["level"] = log_level

    log_format = os.environ.get("FETCH_CACHE_LOG_FORMAT")
    if log_format:
        data.setdefault("logging", {})["format"] = log_format

    capacity = os.environ.get("FETCH_CACHE_DEFAULT_CAPACITY")
    if capacity:
        data.setdefault("default_cache", {})["capacity"] = capacity

    ttl = os.environ.get("FETCH_CACHE_DEFAULT_TTL")
    if ttl:
        data.setdefault("default_cache", {})["ttl_seconds"] = ttl

    return AppConfig.model_validate(data)
