"""Unit-specific fixtures (no I/O beyond tmp_path)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from usbids.persistence import JsonFileRepository

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def repository(tmp_path: Path) -> JsonFileRepository:
    return JsonFileRepository(tmp_path / "data")
