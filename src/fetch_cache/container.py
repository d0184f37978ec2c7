"""CacheContainer: long-lived owner of per-domain caches and coalescers."""

from __future__ import annotations

import time
from pathlib import Path

import httpx
import structlog

from fetch_cache.cache.bounded import BoundedExpiringCache
from fetch_cache.clock import Clock
from fetch_cache.coalescer import InFlightRequestCoalescer
from fetch_cache.config.loader import load_config
from fetch_cache.config.schema import AppConfig, CacheSettings
from fetch_cache.fetcher import CachedFetcher
from fetch_cache.http import CachedHttpClient
from fetch_cache.logging.setup import configure_from, get_logger
from fetch_cache.timing import OperationTimer

log = structlog.get_logger("fetch_cache.container")


class CacheContainer:
    """Builds one cache + coalescer pair per data domain, on first use.

    Construct it once at application start and hand its fetchers and clients
    to whatever needs them; everything it creates lives as long as it does.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        clock: Clock = time.monotonic,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        self._clock = clock
        self._transport = transport
        self.timer: OperationTimer | None = OperationTimer() if self.config.timing_enabled else None
        self._fetchers: dict[str, CachedFetcher] = {}
        self._clients: dict[str, CachedHttpClient] = {}

    @classmethod
    def from_config(
        cls,
        path: str | Path | None = None,
        clock: Clock = time.monotonic,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CacheContainer:
        """Application entry point: load config, apply its logging section, build.

        Reconfigures root logging, so call it once from the host application
        rather than from library code.
        """
        config = load_config(path)
        configure_from(config.logging)
        get_logger("fetch_cache.container", config_path=str(path) if path else None).info(
            "cache_container_configured",
            domains=sorted(config.caches),
            providers=sorted(config.providers),
        )
        return cls(config, clock=clock, transport=transport)

    def settings_for(self, domain: str) -> CacheSettings:
        return self.config.caches.get(domain, self.config.default_cache)

    def fetcher(self, domain: str) -> CachedFetcher:
        """Return the shared fetcher for *domain*, creating it if needed."""
        fetcher = self._fetchers.get(domain)
        if fetcher is None:
            settings = self.settings_for(domain)
            cache = BoundedExpiringCache(
                capacity=settings.capacity,
                ttl=settings.ttl_seconds,
                clock=self._clock,
            )
            fetcher = CachedFetcher(cache, InFlightRequestCoalescer(), self.timer, name=domain)
            self._fetchers[domain] = fetcher
            log.info(
                "cache_domain_created",
                domain=domain,
                capacity=settings.capacity,
                ttl_seconds=settings.ttl_seconds,
            )
        return fetcher

    def cache(self, domain: str) -> BoundedExpiringCache:
        return self.fetcher(domain).cache

    def http_client(self, provider: str) -> CachedHttpClient:
        """Return the cached client for a configured provider.

        Raises KeyError if *provider* is not in ``config.providers``.
        """
        client = self._clients.get(provider)
        if client is None:
            if provider not in self.config.providers:
                raise KeyError(f"Unknown provider: {provider!r}")
            conf = self.config.providers[provider]
            client = CachedHttpClient(
                base_url=conf.base_url,
                fetcher=self.fetcher(conf.cache or provider),
                timeout=conf.timeout_s,
                headers=conf.headers,
                transport=self._transport,
            )
            self._clients[provider] = client
        return client

    @property
    def domains(self) -> list[str]:
        return sorted(self._fetchers)

    def clear_all(self) -> None:
        """Drop every cached entry in every domain."""
        for fetcher in self._fetchers.values():
            fetcher.clear()
        if self.timer is not None:
            self.timer.clear_timings()

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
        log.info("cache_container_closed", domains=self.domains)
