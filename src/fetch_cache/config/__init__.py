"""Configuration system."""

from fetch_cache.config.loader import load_config
from fetch_cache.config.schema import AppConfig, CacheSettings, LoggingConfig, ProviderConfig

__all__ = ["AppConfig", "CacheSettings", "LoggingConfig", "ProviderConfig", "load_config"]
