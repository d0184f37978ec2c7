"""Cached JSON-over-HTTP client: GET requests served through a CachedFetcher."""

from __future__ import annotations

from typing import Any

import httpx

from fetch_cache.cache.keys import fingerprint, make_key
from fetch_cache.fetcher import CachedFetcher


class CachedHttpClient:
    """Async client for a JSON REST API, with cached and coalesced GETs."""

    def __init__(
        self,
        base_url: str,
        fetcher: CachedFetcher,
        timeout: float = 15.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.fetcher = fetcher
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def cache_key(self, path: str, params: dict[str, Any] | None = None) -> str:
        return make_key("GET", self.url_for(path), fingerprint(params or {}))

    async def _get(self, url: str, params: dict[str, Any] | None) -> Any:
        http = await self._get_http()
        resp = await http.get(url, params=params)
        resp.raise_for_status()
        return resp.json()

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        fresh: bool = False,
    ) -> Any:
        """GET *path* and return the decoded JSON body.

        Non-2xx responses raise ``httpx.HTTPStatusError`` and are not cached.
        """
        url = self.url_for(path)
        data, _ = await self.fetcher.get_or_fetch(
            self.cache_key(path, params),
            lambda: self._get(url, params),
            fresh=fresh,
        )
        return data
