"""JSON-file persistence for the published snapshot.

Three files live in the data directory:

- ``usb.ids``              : raw bytes of the last primary download
- ``usb.ids.json``         : serialized Dataset
- ``usb.ids.version.json`` : VersionDescriptor record

Reads degrade gracefully: a missing, unreadable or invalid file loads as
``None`` (logged with ``exc_info=True``) and the caller treats it as "nothing
persisted". Writes go through a temp file + ``os.replace`` so a crash never
leaves a half-written record, and failures raise
``UsbIdsError(PERSISTENCE_FAILED)``.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import ValidationError

from usbids.errors import ErrorCode, UsbIdsError
from usbids.models.registry import Dataset
from usbids.models.version import VersionDescriptor

if TYPE_CHECKING:
    from usbids.config import StorageSettings

log = structlog.get_logger()


class SnapshotRepository(Protocol):
    def load_version(self) -> VersionDescriptor | None: ...

    def save_version(self, version: VersionDescriptor) -> None: ...

    def load_dataset(self) -> Dataset | None: ...

    def save_dataset(self, dataset: Dataset) -> None: ...

    def save_raw(self, raw: bytes) -> None: ...


def serialize_dataset(dataset: Dataset) -> str:
    return json.dumps(dataset.to_json_obj(), indent=2, ensure_ascii=False)


def canonical_json(dataset: Dataset) -> str:
    """Compact serialization hashed for snapshots promoted from disk."""
    return json.dumps(dataset.to_json_obj(), separators=(",", ":"), ensure_ascii=False)


class JsonFileRepository:
    """SnapshotRepository backed by files in one directory."""

    def __init__(
        self,
        data_dir: Path,
        *,
        raw_file: str = "usb.ids",
        dataset_file: str = "usb.ids.json",
        version_file: str = "usb.ids.version.json",
    ) -> None:
        self.data_dir = data_dir
        self.raw_path = data_dir / raw_file
        self.dataset_path = data_dir / dataset_file
        self.version_path = data_dir / version_file

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> JsonFileRepository:
        return cls(
            Path(settings.data_dir).expanduser(),
            raw_file=settings.raw_file,
            dataset_file=settings.dataset_file,
            version_file=settings.version_file,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> object | None:
        if not path.is_file():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            log.warning("persisted_file_unreadable", path=str(path), exc_info=True)
            return None

    def load_version(self) -> VersionDescriptor | None:
        raw = self._read_json(self.version_path)
        if raw is None:
            return None
        try:
            return VersionDescriptor.model_validate(raw)
        except ValidationError:
            log.warning("persisted_version_invalid", path=str(self.version_path), exc_info=True)
            return None

    def load_dataset(self) -> Dataset | None:
        raw = self._read_json(self.dataset_path)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            log.warning("persisted_dataset_invalid", path=str(self.dataset_path))
            return None
        try:
            return Dataset.from_json_obj(raw)
        except ValueError:
            log.warning("persisted_dataset_invalid", path=str(self.dataset_path), exc_info=True)
            return None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _write_atomic(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise UsbIdsError(
                ErrorCode.PERSISTENCE_FAILED,
                f"Failed to write {path}: {exc}",
            ) from exc

    def save_version(self, version: VersionDescriptor) -> None:
        payload = version.model_dump_json(by_alias=True, indent=2)
        self._write_atomic(self.version_path, payload.encode("utf-8"))

    def save_dataset(self, dataset: Dataset) -> None:
        self._write_atomic(self.dataset_path, serialize_dataset(dataset).encode("utf-8"))

    def save_raw(self, raw: bytes) -> None:
        self._write_atomic(self.raw_path, raw)
