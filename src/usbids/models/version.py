from __future__ import annotations

import re
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

_SHA256_HEX = re.compile(r"^[0-9a-f]{64}$")


class SourceKind(StrEnum):
    """Where the published bytes came from.

    Values are the on-disk spellings used by ``usb.ids.version.json``.
    """

    PRIMARY = "api"
    FALLBACK = "fallback"


def format_fetch_time(epoch_ms: int) -> str:
    """Render epoch milliseconds as ``YYYY-MM-DD HH:MM:SS UTC``."""
    moment = datetime.fromtimestamp(epoch_ms / 1000, tz=UTC)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


class VersionDescriptor(BaseModel):
    """Metadata for one published dataset snapshot.

    Field aliases match the persisted version record; ``fetchTimeFormatted``
    is emitted on dump and ignored on load.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fetch_time: int = Field(alias="fetchTime")  # epoch milliseconds
    content_hash: str = Field(alias="contentHash")
    source_kind: SourceKind = Field(alias="source")
    vendor_count: int = Field(alias="vendorCount", ge=0)
    device_count: int = Field(alias="deviceCount", ge=0)
    version_label: str = Field(alias="version")  # "1.0.<fetch_time>", not semver

    @field_validator("content_hash")
    @classmethod
    def validate_content_hash(cls, v: str) -> str:
        if not _SHA256_HEX.match(v):
            raise ValueError(f"Invalid content hash: {v!r}")
        return v

    @computed_field(alias="fetchTimeFormatted")  # type: ignore[prop-decorator]
    @property
    def fetch_time_formatted(self) -> str:
        return format_fetch_time(self.fetch_time)
