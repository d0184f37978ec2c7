"""Tests for CacheContainer: per-domain wiring from config."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from fetch_cache.config import AppConfig, CacheSettings, ProviderConfig
from fetch_cache.container import CacheContainer


def _config(**overrides) -> AppConfig:
    data = {
        "caches": {"movies": CacheSettings(capacity=2, ttl_seconds=10)},
        "providers": {
            "tmdb": ProviderConfig(base_url="https://api.example.com/3", cache="movies"),
            "reviews_api": ProviderConfig(base_url="http://localhost:5000/api"),
        },
    }
    data.update(overrides)
    return AppConfig(**data)


class TestCacheContainer:
    def test_domain_uses_configured_settings(self, clock):
        container = CacheContainer(_config(), clock=clock)
        cache = container.cache("movies")
        assert cache.capacity == 2
        assert cache.ttl == 10

    def test_unknown_domain_uses_default_settings(self, clock):
        container = CacheContainer(_config(), clock=clock)
        cache = container.cache("trending")
        assert cache.capacity == 100
        assert cache.ttl == 300

    def test_domain_instances_shared(self, clock):
        container = CacheContainer(_config(), clock=clock)
        assert container.fetcher("movies") is container.fetcher("movies")
        assert container.cache("movies") is not container.cache("search")
        assert container.fetcher("movies").coalescer is not container.fetcher("search").coalescer
        assert container.domains == ["movies", "search"]

    def test_injected_clock_drives_expiry(self, clock):
        container = CacheContainer(_config(), clock=clock)
        cache = container.cache("movies")
        cache.set("550", {"title": "Fight Club"})
        clock.advance(10)
        assert cache.get("550") is None

    def test_timer_shared_or_disabled(self, clock):
        container = CacheContainer(_config(), clock=clock)
        assert container.fetcher("movies").timer is container.timer
        disabled = CacheContainer(_config(timing_enabled=False), clock=clock)
        assert disabled.timer is None
        assert disabled.fetcher("movies").timer is None

    def test_http_client_uses_provider_domain(self, clock):
        container = CacheContainer(_config(), clock=clock)
        tmdb = container.http_client("tmdb")
        reviews = container.http_client("reviews_api")
        assert tmdb.fetcher is container.fetcher("movies")
        assert reviews.fetcher is container.fetcher("reviews_api")
        assert container.http_client("tmdb") is tmdb

    def test_unknown_provider_raises(self, clock):
        container = CacheContainer(_config(), clock=clock)
        with pytest.raises(KeyError):
            container.http_client("nope")

    def test_clear_all(self, clock):
        container = CacheContainer(_config(), clock=clock)
        container.cache("movies").set("a", 1)
        container.cache("search").set("b", 2)
        container.timer.start_timing("x")
        container.clear_all()
        assert container.cache("movies").size() == 0
        assert container.cache("search").size() == 0
        assert container.timer.get_all_timings() == {}

    def test_end_to_end_fetch_and_close(self, clock):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": 550})

        container = CacheContainer(_config(), clock=clock, transport=httpx.MockTransport(handler))

        async def scenario():
            client = container.http_client("tmdb")
            first = await client.get_json("movie/550")
            second = await client.get_json("movie/550")
            await container.close()
            return first, second

        assert asyncio.run(scenario()) == ({"id": 550}, {"id": 550})
        assert len(requests) == 1
        assert str(requests[0].url) == "https://api.example.com/3/movie/550"
        assert container.cache("movies").size() == 1

    def test_fetchers_named_after_domain(self, clock):
        container = CacheContainer(_config(), clock=clock)
        assert container.fetcher("movies").name == "movies"
        assert container.http_client("reviews_api").fetcher.name == "reviews_api"

    def test_timer_stays_bounded(self, clock):
        config = _config(caches={"search": CacheSettings(capacity=2, ttl_seconds=60)})
        container = CacheContainer(config, clock=clock)
        fetcher = container.fetcher("search")

        async def fetch():
            return []

        async def scenario():
            for i in range(100):
                await fetcher.get_or_fetch(f"q:{i}", fetch)
            await container.fetcher("movies").get_or_fetch("550", fetch)

        asyncio.run(scenario())
        assert container.cache("search").size() == 2
        assert sorted(container.timer.get_all_timings()) == ["fetch:movies", "fetch:search"]

    def test_clear_all_not_undone_by_in_flight_fetch(self, clock):
        container = CacheContainer(_config(), clock=clock)
        fetcher = container.fetcher("movies")
        gate = None

        async def fetch():
            await gate.wait()
            return "pre-clear"

        async def scenario():
            nonlocal gate
            gate = asyncio.Event()
            task = asyncio.create_task(fetcher.get_or_fetch("k", fetch))
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            container.clear_all()
            gate.set()
            return await task

        assert asyncio.run(scenario()) == ("pre-clear", "live")
        assert fetcher.cache.get("k") is None


class TestFromConfig:
    def test_builds_from_yaml_and_applies_logging(self, tmp_path, capsys):
        p = tmp_path / "config.yaml"
        p.write_text(
            "caches:\n"
            "  movies:\n"
            "    capacity: 5\n"
            "    ttl_seconds: 30\n"
            "logging:\n"
            "  level: WARNING\n"
            "  format: json\n"
        )
        container = CacheContainer.from_config(p)
        assert container.cache("movies").capacity == 5
        assert logging.getLogger().level == logging.WARNING
        # INFO events are filtered at the configured level
        assert "cache_container_configured" not in capsys.readouterr().err

    def test_logs_configuration_at_info(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("FETCH_CACHE_LOG_LEVEL", "INFO")
        monkeypatch.setenv("FETCH_CACHE_LOG_FORMAT", "json")
        container = CacheContainer.from_config(None)

        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert line["event"] == "cache_container_configured"
        assert line["providers"] == []
        assert container.config.logging.level == "INFO"
