"""Content fingerprinting and version descriptors.

The fingerprint covers the raw bytes exactly as received, never the parsed
structure, so byte-identical downloads always compare equal.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from usbids.models.version import SourceKind, VersionDescriptor

if TYPE_CHECKING:
    from usbids.models.registry import Dataset

VERSION_PREFIX = "1.0."


def fingerprint(raw: bytes | str) -> str:
    """SHA-256 of ``raw`` as lowercase hex. ``str`` input is hashed as UTF-8."""
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def version_label(epoch_ms: int) -> str:
    return f"{VERSION_PREFIX}{epoch_ms}"


def build_version(
    dataset: Dataset,
    raw: bytes | str,
    source_kind: SourceKind,
    now_ms: int,
) -> VersionDescriptor:
    """Combine the fingerprint, dataset counts and fetch time. No I/O."""
    return VersionDescriptor(
        fetch_time=now_ms,
        content_hash=fingerprint(raw),
        source_kind=source_kind,
        vendor_count=len(dataset),
        device_count=dataset.device_count,
        version_label=version_label(now_ms),
    )
