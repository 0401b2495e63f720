"""Filter variants accepted by the query engine.

A filter is one of three closed cases:

- ``SubstringMatch``: case-insensitive substring against id OR name.
- ``Predicate``: caller-supplied callable over the entity.
- ``StructuredMatch``: per-field substring constraints, ANDed together.

``coerce_filter`` maps the loose forms callers tend to pass (``str``,
callables, mappings) onto these cases.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from usbids.errors import ErrorCode, UsbIdsError


@dataclass(frozen=True)
class SubstringMatch:
    text: str


@dataclass(frozen=True)
class Predicate:
    fn: Callable[[Any], bool]


class StructuredMatch(BaseModel):
    """Structured filter; empty or missing fields impose no constraint."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    id: str | None = None
    name: str | None = None
    search: str | None = None


Filter = SubstringMatch | Predicate | StructuredMatch


def coerce_filter(value: Any) -> Filter | None:
    """Normalize a loose filter argument. ``None`` means no filter.

    Raises ``pydantic.ValidationError`` for mappings with bad field types
    and ``UsbIdsError(INVALID_FILTER)`` for unsupported kinds.
    """
    if value is None:
        return None
    if isinstance(value, (SubstringMatch, Predicate, StructuredMatch)):
        return value
    if isinstance(value, str):
        return SubstringMatch(value)
    if isinstance(value, Mapping):
        return StructuredMatch.model_validate(dict(value))
    if callable(value):
        return Predicate(value)
    raise UsbIdsError(
        ErrorCode.INVALID_FILTER,
        f"Unsupported filter type: {type(value).__name__}",
    )
