"""Asynchronous HTTP fetcher backed by :class:`httpx.AsyncClient`.

The fetcher performs exactly one GET per call.  It does not retry, does not
cache, and imposes no timeout of its own beyond
:attr:`~assetcache.models.RequestConfig.timeout`, which httpx enforces.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

import httpx

from assetcache.exceptions import FetchFailure
from assetcache.models import RequestConfig
from assetcache.output import OutputManager, get_output


@runtime_checkable
class Fetcher(Protocol):
    """Retrieval capability consumed by :class:`~assetcache.cache.AssetCache`."""

    async def fetch(self, url: str) -> bytes:
        ...


class HttpFetcher:
    """Fetch a URL's full body as bytes.

    Args:
        config: Timeout, SSL verification, user agent and static headers.
        client: Optional pre-built :class:`httpx.AsyncClient`.  When given it
            is used as-is and never closed here (tests inject one built on
            :class:`httpx.MockTransport`).  Otherwise a client is opened and
            closed around each fetch.
        output: Logger for debug lines; defaults to the global instance.

    Example::

        fetcher = HttpFetcher(RequestConfig(timeout=10))
        body = await fetcher.fetch("https://example.com/data.json")
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        output: Optional[OutputManager] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._client = client
        self._output = output

    async def fetch(self, url: str) -> bytes:
        """GET *url* and return the response body.

        Raises:
            FetchFailure: On a non-2xx status (with ``status_code`` and
                ``status_text`` set) or on any transport error.
        """
        if self._client is not None:
            return await self._get(self._client, url)

        async with httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        ) as client:
            return await self._get(client, url)

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": self._config.user_agent}
        headers.update(self._config.headers)
        return headers

    async def _get(self, client: httpx.AsyncClient, url: str) -> bytes:
        output = self._output or get_output()
        output.debug(f"GET {url}")
        try:
            response = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise FetchFailure(f"Request failed for {url}: {exc}") from exc

        if not response.is_success:
            reason = response.reason_phrase or ""
            raise FetchFailure(
                f"Bad response for {url} ({response.status_code}): {reason}".rstrip(": "),
                status_code=response.status_code,
                status_text=reason,
            )

        body = response.content
        output.debug(f"Received {len(body)} bytes from {url} (HTTP {response.status_code})")
        return body
