"""Parser, versioning and query engine for the USB ID registry (usb.ids)."""

from __future__ import annotations

from usbids.config import Settings
from usbids.errors import DataUnavailableError, ErrorCode, SourceUnavailableError, UsbIdsError
from usbids.fetcher import HttpSource, RawSource, build_http_client, fetch_first
from usbids.fingerprint import build_version, fingerprint
from usbids.logs import configure_logging
from usbids.models import (
    Dataset,
    Device,
    DeviceMatch,
    Predicate,
    SourceKind,
    StructuredMatch,
    SubstringMatch,
    Vendor,
    VersionDescriptor,
)
from usbids.parser import parse
from usbids.persistence import JsonFileRepository
from usbids.policy import should_update
from usbids.query import QueryEngine
from usbids.store import DataStore, Snapshot, Unchanged, Updated
from usbids.updater import Updater, build_updater

__all__ = [
    "DataStore",
    "DataUnavailableError",
    "Dataset",
    "Device",
    "DeviceMatch",
    "ErrorCode",
    "HttpSource",
    "JsonFileRepository",
    "Predicate",
    "QueryEngine",
    "RawSource",
    "Settings",
    "Snapshot",
    "SourceKind",
    "SourceUnavailableError",
    "StructuredMatch",
    "SubstringMatch",
    "Unchanged",
    "Updated",
    "Updater",
    "UsbIdsError",
    "Vendor",
    "VersionDescriptor",
    "build_http_client",
    "build_updater",
    "build_version",
    "configure_logging",
    "fetch_first",
    "fingerprint",
    "parse",
    "should_update",
]
