from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
)

_HEX_ID = re.compile(r"^[0-9a-f]{4}$")


def _validate_hex_id(v: str) -> str:
    if not _HEX_ID.match(v):
        raise ValueError(f"Invalid USB ID: {v!r}")
    return v


class Device(BaseModel):
    """Single product entry nested under a vendor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="devid")
    name: str = Field(alias="devname")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _validate_hex_id(v)


class Vendor(BaseModel):
    """Vendor entry with its devices keyed by lowercase device ID."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="vendor")
    name: str
    devices: Mapping[str, Device] = MappingProxyType({})

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _validate_hex_id(v)

    @field_validator("devices")
    @classmethod
    def freeze_devices(cls, v: Mapping[str, Device]) -> Mapping[str, Device]:
        for key, device in v.items():
            if key != device.id:
                raise ValueError(f"device key {key!r} does not match devid {device.id!r}")
        return MappingProxyType(dict(v))

    @field_serializer("devices", mode="wrap")
    def dump_devices(
        self, v: Mapping[str, Device], handler: SerializerFunctionWrapHandler
    ) -> Any:
        return handler(dict(v))


class DeviceMatch(BaseModel):
    """Single result returned by search_devices."""

    vendor: Vendor
    device: Device
    relevance: int  # additive score, see query._score


class Dataset(Mapping[str, Vendor]):
    """Read-only vendor ID → Vendor mapping for one registry snapshot.

    Published datasets are never mutated; a refresh builds a new instance.
    """

    __slots__ = ("_vendors",)

    def __init__(self, vendors: Mapping[str, Vendor] | None = None) -> None:
        self._vendors: dict[str, Vendor] = dict(vendors or {})

    def __getitem__(self, vendor_id: str) -> Vendor:
        return self._vendors[vendor_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._vendors)

    def __len__(self) -> int:
        return len(self._vendors)

    def __repr__(self) -> str:
        return f"Dataset(vendors={len(self)}, devices={self.device_count})"

    @property
    def device_count(self) -> int:
        return sum(len(vendor.devices) for vendor in self._vendors.values())

    def to_json_obj(self) -> dict[str, Any]:
        """Serialize to the ``usb.ids.json`` layout (vendor/name/devices, devid/devname)."""
        return {vid: vendor.model_dump(by_alias=True) for vid, vendor in self._vendors.items()}

    @classmethod
    def from_json_obj(cls, obj: Mapping[str, Any]) -> Dataset:
        """Inverse of ``to_json_obj``. Map keys must equal the ids they hold."""
        vendors: dict[str, Vendor] = {}
        for vid, raw in obj.items():
            vendor = Vendor.model_validate(raw)
            if vid != vendor.id:
                raise ValueError(f"vendor key {vid!r} does not match vendor {vendor.id!r}")
            vendors[vid] = vendor
        return cls(vendors)
