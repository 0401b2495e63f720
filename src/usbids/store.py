"""In-memory data store holding the active (Dataset, VersionDescriptor) pair.

The pair lives in a single immutable ``Snapshot``; publishing swaps that one
reference, so readers see either the old pair or the new one, never a mix.
Readers take no lock. Refreshes are serialized by a ``threading.Lock`` held
across the whole read-check-publish sequence; it is never held across an
await, so the store is safe to call from both threads and an event loop.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

import structlog

from usbids.fingerprint import build_version, fingerprint
from usbids.models.registry import Dataset
from usbids.models.version import SourceKind, VersionDescriptor
from usbids.parser import parse
from usbids.policy import DEFAULT_INTERVAL_MS, should_update

log = structlog.get_logger()

UnchangedReason = Literal["not_due", "content_unchanged", "source_unavailable"]


@dataclass(frozen=True)
class Snapshot:
    dataset: Dataset
    version: VersionDescriptor


@dataclass(frozen=True)
class Updated:
    version: VersionDescriptor
    updated = True


@dataclass(frozen=True)
class Unchanged:
    version: VersionDescriptor | None
    reason: UnchangedReason
    updated = False


RefreshOutcome = Updated | Unchanged


def decode_raw(raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")


class DataStore:
    """Owns the currently published snapshot."""

    def __init__(
        self,
        parser: Callable[[str], Dataset] = parse,
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> None:
        self._parser = parser
        self._interval_ms = interval_ms
        self._snapshot: Snapshot | None = None
        self._write_lock = threading.Lock()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def get_current(self) -> Snapshot | None:
        return self._snapshot

    @property
    def current_version(self) -> VersionDescriptor | None:
        snapshot = self._snapshot
        return snapshot.version if snapshot is not None else None

    def publish(self, dataset: Dataset, version: VersionDescriptor) -> None:
        self._snapshot = Snapshot(dataset=dataset, version=version)
        log.info(
            "registry_published",
            version=version.version_label,
            source=version.source_kind.value,
            vendors=version.vendor_count,
            devices=version.device_count,
        )

    def publish_if_empty(self, dataset: Dataset, version: VersionDescriptor) -> bool:
        """Publish only when nothing is published yet. Returns True if it did.

        Used to seed the store from disk; never replaces a live snapshot.
        """
        with self._write_lock:
            current = self._snapshot
            if current is not None:
                log.info(
                    "registry_publish_skipped",
                    reason="already_published",
                    version=current.version.version_label,
                )
                return False
            self.publish(dataset, version)
            return True

    def consider_refresh(
        self,
        raw: bytes | str,
        source_kind: SourceKind,
        now: int,
        force_update: bool = False,
    ) -> RefreshOutcome:
        """Publish ``raw`` if the time gate is open and its content is new."""
        with self._write_lock:
            previous = self.current_version

            if not should_update(previous, force_update, now, self._interval_ms):
                log.debug("registry_refresh_skipped", reason="not_due")
                return Unchanged(previous, "not_due")

            new_hash = fingerprint(raw)
            if previous is not None and not force_update and new_hash == previous.content_hash:
                log.info(
                    "registry_refresh_skipped",
                    reason="content_unchanged",
                    content_hash=new_hash,
                )
                return Unchanged(previous, "content_unchanged")

            dataset = self._parser(decode_raw(raw))
            version = build_version(dataset, raw, source_kind, now)
            self.publish(dataset, version)
            return Updated(version)
