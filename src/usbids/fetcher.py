"""Raw-bytes sources for the registry.

A ``RawSource`` yields the registry bytes or raises
``UsbIdsError(SOURCE_FETCH_FAILED)``. ``fetch_first`` walks an ordered list
of sources and returns the first success; when all of them fail it raises
``SourceUnavailableError`` and the caller keeps whatever snapshot it already
has.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import httpx
import structlog

from usbids.config import FetcherSettings
from usbids.errors import ErrorCode, SourceUnavailableError, UsbIdsError
from usbids.policy import now_ms

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()

USER_AGENT = "usbids/1.0"


class RawSource(Protocol):
    @property
    def name(self) -> str: ...

    async def fetch_raw(self) -> bytes: ...


def build_http_client(settings: FetcherSettings | None = None) -> httpx.AsyncClient:
    """Create the shared AsyncClient used by every HttpSource."""
    settings = settings or FetcherSettings()
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": USER_AGENT},
    )


class HttpSource:
    """Downloads the registry from one URL over HTTP(S)."""

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url

    @property
    def name(self) -> str:
        return self._url

    async def fetch_raw(self) -> bytes:
        try:
            # _t defeats intermediate caches that ignore Cache-Control
            response = await self._client.get(self._url, params={"_t": str(now_ms())})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UsbIdsError(
                ErrorCode.SOURCE_FETCH_FAILED,
                f"Network error fetching {self._url}: {exc}",
                recoverable=True,
            ) from exc

        if response.status_code != 200:
            raise UsbIdsError(
                ErrorCode.SOURCE_FETCH_FAILED,
                f"HTTP {response.status_code} fetching {self._url}",
                recoverable=True,
            )
        return response.content


def build_sources(client: httpx.AsyncClient, urls: Sequence[str]) -> list[HttpSource]:
    return [HttpSource(client, url) for url in urls]


async def fetch_first(sources: Sequence[RawSource]) -> tuple[bytes, RawSource]:
    """Return ``(raw, source)`` from the first source that succeeds."""
    attempted: list[str] = []
    for source in sources:
        attempted.append(source.name)
        try:
            raw = await source.fetch_raw()
        except UsbIdsError as exc:
            log.warning("source_fetch_failed", source=source.name, error=exc.message)
            continue
        log.info("source_fetch_succeeded", source=source.name, size=len(raw))
        return raw, source

    raise SourceUnavailableError(
        f"All {len(attempted)} registry sources failed",
        attempted=attempted,
    )
