"""Configuration schema: Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CacheSettings(BaseModel):
    capacity: int = Field(default=100, gt=0)
    ttl_seconds: float = Field(default=300.0, gt=0, allow_inf_nan=False)


class ProviderConfig(BaseModel):
    base_url: str
    timeout_s: float = Field(default=15.0, gt=0)
    headers: dict[str, str] = Field(default_factory=dict)
    # Cache domain to use; defaults to the provider's own name
    cache: str | None = None


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    default_cache: CacheSettings = Field(default_factory=CacheSettings)
    caches: dict[str, CacheSettings] = Field(default_factory=dict)
    providers: dict[str, ProviderConfig] = Field(default_factory=dict)
    timing_enabled: bool = True
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
