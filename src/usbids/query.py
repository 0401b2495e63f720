"""Vendor/device lookup, filtering and relevance-ranked search.

Every operation reads the store's current snapshot once and never mutates
it. Querying before anything has been published raises
``DataUnavailableError`` so that "no data yet" stays distinguishable from
"no matches".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from usbids.errors import DataUnavailableError
from usbids.models.filters import Predicate, StructuredMatch, SubstringMatch, coerce_filter
from usbids.models.registry import Dataset, Device, DeviceMatch, Vendor

if TYPE_CHECKING:
    from collections.abc import Iterable

    from usbids.models.version import VersionDescriptor
    from usbids.store import DataStore, Snapshot

T = TypeVar("T", Vendor, Device)

# Relevance weights. Additive; exact and partial device-ID hits are exclusive.
SCORE_EXACT_DEVICE_ID = 100
SCORE_PARTIAL_DEVICE_ID = 50
SCORE_DEVICE_NAME = 30
SCORE_VENDOR = 10


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def _matches(item: Vendor | Device, flt: SubstringMatch | StructuredMatch | Predicate) -> bool:
    if isinstance(flt, Predicate):
        return bool(flt.fn(item))

    if isinstance(flt, SubstringMatch):
        return _contains(item.id, flt.text) or _contains(item.name, flt.text)

    # StructuredMatch: each non-empty field is its own constraint
    if flt.id and not _contains(item.id, flt.id):
        return False
    if flt.name and not _contains(item.name, flt.name):
        return False
    if flt.search:
        return _contains(item.id, flt.search) or _contains(item.name, flt.search)
    return True


def filter_items(items: Iterable[T], flt: Any = None) -> list[T]:
    """Apply a (possibly loose) filter to vendors or devices.

    Predicate exceptions propagate to the caller unchanged.
    """
    normalized = coerce_filter(flt)
    if normalized is None:
        return list(items)
    return [item for item in items if _matches(item, normalized)]


def _score(vendor: Vendor, device: Device, term: str) -> int:
    """Relevance of one (vendor, device) pair; 0 means no match. ``term`` is lowercase."""
    device_id = device.id.lower()
    device_id_match = term in device_id
    device_name_match = term in device.name.lower()
    vendor_match = term in vendor.name.lower() or term in vendor.id.lower()

    score = 0
    if device_id == term:
        score += SCORE_EXACT_DEVICE_ID
    elif device_id_match:
        score += SCORE_PARTIAL_DEVICE_ID
    if device_name_match:
        score += SCORE_DEVICE_NAME
    if vendor_match:
        score += SCORE_VENDOR
    return score


def search_dataset(dataset: Dataset, query: str) -> list[DeviceMatch]:
    """Rank every device whose id/name or vendor id/name contains ``query``.

    A blank query returns no results. Order among equal scores is
    unspecified.
    """
    term = query.strip().lower()
    if not term:
        return []

    results: list[DeviceMatch] = []
    for vendor in dataset.values():
        for device in vendor.devices.values():
            score = _score(vendor, device, term)
            if score:
                results.append(DeviceMatch(vendor=vendor, device=device, relevance=score))

    results.sort(key=lambda m: m.relevance, reverse=True)
    return results


class QueryEngine:
    """Read-only query surface over a ``DataStore``."""

    def __init__(self, store: DataStore) -> None:
        self._store = store

    def _snapshot(self) -> Snapshot:
        snapshot = self._store.get_current()
        if snapshot is None:
            raise DataUnavailableError()
        return snapshot

    def get_dataset(self) -> Dataset:
        return self._snapshot().dataset

    def get_version(self) -> VersionDescriptor:
        return self._snapshot().version

    def get_vendors(self, flt: Any = None) -> list[Vendor]:
        """All vendors matching ``flt`` (``None`` → every vendor)."""
        return filter_items(self._snapshot().dataset.values(), flt)

    def get_vendor(self, flt: Any) -> Vendor | None:
        """Some vendor matching ``flt``.

        When several vendors match, which one is returned is unspecified.
        """
        vendors = self.get_vendors(flt)
        return vendors[0] if vendors else None

    def get_devices(self, vendor_id: str, flt: Any = None) -> list[Device]:
        """Devices of one vendor; an unknown vendor yields an empty list."""
        vendor = self._snapshot().dataset.get(vendor_id.strip().lower())
        if vendor is None:
            return []
        return filter_items(vendor.devices.values(), flt)

    def get_device(self, vendor_id: str, device_id: str) -> Device | None:
        vendor = self._snapshot().dataset.get(vendor_id.strip().lower())
        if vendor is None:
            return None
        return vendor.devices.get(device_id.strip().lower())

    def search_devices(self, query: str) -> list[DeviceMatch]:
        return search_dataset(self._snapshot().dataset, query)
