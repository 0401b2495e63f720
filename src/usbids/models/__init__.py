from __future__ import annotations

from usbids.models.filters import (
    Filter,
    Predicate,
    StructuredMatch,
    SubstringMatch,
    coerce_filter,
)
from usbids.models.registry import Dataset, Device, DeviceMatch, Vendor
from usbids.models.version import SourceKind, VersionDescriptor, format_fetch_time

__all__ = [
    # registry
    "Dataset",
    "Device",
    "DeviceMatch",
    "Vendor",
    # version
    "SourceKind",
    "VersionDescriptor",
    "format_fetch_time",
    # filters
    "Filter",
    "Predicate",
    "StructuredMatch",
    "SubstringMatch",
    "coerce_filter",
]
