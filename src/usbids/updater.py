"""Registry refresh orchestration.

Flow for one ``refresh``:

1. Time gate (``policy.should_update``): when not due, nothing is fetched.
2. ``fetch_first`` over the configured sources.
3. ``DataStore.consider_refresh``: content-hash gate, parse, publish.
4. On publish, persist raw bytes, dataset and version record.

When every source fails the updater keeps the published snapshot if there is
one, otherwise promotes the persisted dataset as a ``fallback`` snapshot.
Only when neither exists does the refresh attempt raise.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from usbids.errors import SourceUnavailableError, UsbIdsError
from usbids.fetcher import RawSource, build_sources, fetch_first
from usbids.fingerprint import build_version, fingerprint
from usbids.models.version import SourceKind
from usbids.persistence import JsonFileRepository, SnapshotRepository, canonical_json
from usbids.policy import HOUR_MS, now_ms, should_update
from usbids.store import DataStore, RefreshOutcome, Unchanged, Updated

if TYPE_CHECKING:
    import httpx

    from usbids.config import Settings
    from usbids.models.version import VersionDescriptor

log = structlog.get_logger()


class Updater:
    def __init__(
        self,
        store: DataStore,
        repository: SnapshotRepository,
        sources: Sequence[RawSource],
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self._repository = repository
        self._sources = list(sources)
        self._clock = clock
        self._lock = asyncio.Lock()

    def load_persisted(self) -> bool:
        """Seed the store from disk. Returns True if a snapshot was published."""
        version = self._repository.load_version()
        dataset = self._repository.load_dataset()
        if version is None or dataset is None:
            log.info(
                "registry_persisted_missing",
                has_version=version is not None,
                has_dataset=dataset is not None,
            )
            return False
        return self.store.publish_if_empty(dataset, version)

    async def refresh(self, force_update: bool = False, now: int | None = None) -> RefreshOutcome:
        async with self._lock:
            if now is None:
                now = self._clock()
            previous = self.store.current_version

            if not should_update(previous, force_update, now, self.store.interval_ms):
                log.info(
                    "registry_update_not_due",
                    version=previous.version_label if previous else None,
                )
                return Unchanged(previous, "not_due")

            try:
                raw, source = await fetch_first(self._sources)
            except SourceUnavailableError as exc:
                return self._recover(exc, now)

            outcome = self.store.consider_refresh(raw, SourceKind.PRIMARY, now, force_update)
            if isinstance(outcome, Updated):
                log.info(
                    "registry_updated",
                    source=source.name,
                    version=outcome.version.version_label,
                )
                self._persist(outcome.version, raw)
            return outcome

    async def check_remote_changed(self) -> bool:
        """True when the remote registry differs from the current version.

        An unreachable remote or a missing local version also count as changed.
        """
        previous = self.store.current_version or self._repository.load_version()
        try:
            raw, _ = await fetch_first(self._sources)
        except SourceUnavailableError:
            log.warning("registry_remote_check_failed")
            return True
        if previous is None:
            return True
        remote_hash = fingerprint(raw)
        changed = remote_hash != previous.content_hash
        log.info(
            "registry_remote_checked",
            changed=changed,
            remote_hash=remote_hash,
            local_hash=previous.content_hash,
        )
        return changed

    def _recover(self, exc: SourceUnavailableError, now: int) -> RefreshOutcome:
        snapshot = self.store.get_current()
        if snapshot is not None:
            log.warning(
                "registry_source_unavailable",
                attempted=exc.attempted,
                keeping=snapshot.version.version_label,
            )
            return Unchanged(snapshot.version, "source_unavailable")

        dataset = self._repository.load_dataset()
        if dataset is None:
            log.error("registry_unavailable", attempted=exc.attempted)
            raise exc

        version = build_version(dataset, canonical_json(dataset), SourceKind.FALLBACK, now)
        if not self.store.publish_if_empty(dataset, version):
            # Another writer published while the dataset was loading.
            return Unchanged(self.store.current_version, "source_unavailable")
        log.warning("registry_fallback_published", version=version.version_label)
        self._persist_version(version)
        return Updated(version)

    def _persist(self, version: VersionDescriptor, raw: bytes) -> None:
        snapshot = self.store.get_current()
        if snapshot is None or snapshot.version != version:
            # A newer publish already superseded this one; it persists itself.
            return
        try:
            self._repository.save_raw(raw)
            self._repository.save_dataset(snapshot.dataset)
        except UsbIdsError:
            log.error("registry_persist_failed", exc_info=True)
            return
        self._persist_version(version)

    def _persist_version(self, version: VersionDescriptor) -> None:
        try:
            self._repository.save_version(version)
        except UsbIdsError:
            log.error("registry_persist_failed", exc_info=True)


def build_updater(settings: Settings, client: httpx.AsyncClient) -> Updater:
    """Wire store, repository and HTTP sources from settings."""
    store = DataStore(interval_ms=settings.update.interval_hours * HOUR_MS)
    repository = JsonFileRepository.from_settings(settings.storage)
    sources = build_sources(client, settings.sources.urls)
    return Updater(store, repository, sources)

