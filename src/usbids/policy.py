"""Time-based refresh gate.

Decides whether a refresh attempt is made at all. Whether the attempt
actually publishes is decided separately by the content-hash comparison in
``DataStore.consider_refresh``.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from usbids.models.version import VersionDescriptor

HOUR_MS = 60 * 60 * 1000
DEFAULT_INTERVAL_MS = 24 * HOUR_MS


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def should_update(
    previous: VersionDescriptor | None,
    force_update: bool,
    now: int,
    interval_ms: int = DEFAULT_INTERVAL_MS,
) -> bool:
    if force_update:
        return True
    if previous is None:
        return True
    return now - previous.fetch_time >= interval_ms
