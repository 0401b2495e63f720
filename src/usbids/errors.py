"""Typed errors raised across the usbids package.

Every error carries a machine-readable ``ErrorCode`` and a ``recoverable``
flag so callers can decide whether retrying (or falling back to a persisted
snapshot) makes sense.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    SOURCE_FETCH_FAILED = "SOURCE_FETCH_FAILED"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    INVALID_FILTER = "INVALID_FILTER"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"


class UsbIdsError(Exception):
    """Base error with a code and a recoverability hint."""

    def __init__(self, code: ErrorCode, message: str, *, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class DataUnavailableError(UsbIdsError):
    """A query was issued before any dataset was published."""

    def __init__(self, message: str = "No USB ID dataset has been loaded yet") -> None:
        super().__init__(ErrorCode.DATA_UNAVAILABLE, message, recoverable=True)


class SourceUnavailableError(UsbIdsError):
    """Every configured raw-bytes origin failed."""

    def __init__(self, message: str, *, attempted: list[str] | None = None) -> None:
        super().__init__(ErrorCode.SOURCE_UNAVAILABLE, message, recoverable=True)
        self.attempted = attempted or []
