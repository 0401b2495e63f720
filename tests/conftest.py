"""Shared fixtures: sample registry text and a published store."""

from __future__ import annotations

import pytest

from usbids.fingerprint import build_version
from usbids.models.version import SourceKind
from usbids.parser import parse
from usbids.query import QueryEngine
from usbids.store import DataStore

SAMPLE_REGISTRY = (
    "#\n"
    "#\tList of USB ID's\n"
    "#\n"
    "# Version: 2025.01.01\n"
    "\n"
    "1d6b  Linux Foundation\n"
    "\t0001  1.1 root hub\n"
    "\t0002  2.0 root hub\n"
    "05ac  Apple, Inc.\n"
    "\t12a8  iPhone 5/5C/5S/6/SE/7/8/X\n"
)

T0 = 1_735_689_600_000  # 2025-01-01 00:00:00 UTC in epoch ms


@pytest.fixture()
def sample_text() -> str:
    return SAMPLE_REGISTRY


@pytest.fixture()
def sample_bytes() -> bytes:
    return SAMPLE_REGISTRY.encode("utf-8")


@pytest.fixture()
def store(sample_bytes: bytes) -> DataStore:
    """DataStore with the sample registry published at T0."""
    s = DataStore()
    dataset = parse(sample_bytes.decode("utf-8"))
    s.publish(dataset, build_version(dataset, sample_bytes, SourceKind.PRIMARY, T0))
    return s


@pytest.fixture()
def engine(store: DataStore) -> QueryEngine:
    return QueryEngine(store)
