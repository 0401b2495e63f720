"""Integration test fixtures.

Provides a fully wired Updater + QueryEngine built from Settings, with the
data directory under tmp_path and HTTP served by respx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from usbids.config import Settings
from usbids.fetcher import build_http_client
from usbids.query import QueryEngine
from usbids.updater import build_updater

if TYPE_CHECKING:
    from pathlib import Path

PRIMARY_URL = "http://usb.example.com/usb.ids"
MIRROR_URL = "https://mirror.example.org/hwdb.d/usb.ids"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        sources={"urls": [PRIMARY_URL, MIRROR_URL]},
        storage={"data_dir": str(tmp_path / "data")},
        fetcher={"timeout_seconds": 2.0},
    )


@pytest.fixture()
async def wired(settings: Settings):
    """(updater, engine) sharing one store and one AsyncClient."""
    client = build_http_client(settings.fetcher)
    try:
        updater = build_updater(settings, client)
        yield updater, QueryEngine(updater.store)
    finally:
        await client.aclose()
