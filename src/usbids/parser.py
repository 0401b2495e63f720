"""usb.ids parser.

The registry is community-maintained free text, so parsing is deliberately
permissive: malformed vendor headers, orphan device lines and deeper-nested
interface lines are dropped rather than failing the whole parse.

Line layout::

    # comment
    vvvv  Vendor name
    <TAB>dddd  Device name
    <TAB><TAB>iiii  Interface name      (ignored)
"""

from __future__ import annotations

import re

from usbids.models.registry import Dataset, Device, Vendor

_VENDOR_LINE = re.compile(r"^([0-9a-f]{4})\s(.+)$", re.IGNORECASE)
_DEVICE_LINE = re.compile(r"^\t([0-9a-f]{4})\s(.+)$", re.IGNORECASE)


def parse(raw: str) -> Dataset:
    """Parse registry text into a Dataset in a single top-to-bottom pass.

    Redefined vendor or device IDs replace earlier entries (last write wins);
    a redefined vendor starts again with an empty device map.
    """
    vendors: dict[str, tuple[str, dict[str, Device]]] = {}
    current: str | None = None

    for line in raw.split("\n"):
        if line.startswith("#") or not line.strip():
            continue

        if not line.startswith("\t"):
            match = _VENDOR_LINE.match(line)
            if match:
                current = match.group(1).lower()
                vendors[current] = (match.group(2).strip(), {})
            continue

        if line.startswith("\t\t") or current is None:
            continue

        match = _DEVICE_LINE.match(line)
        if match:
            device_id = match.group(1).lower()
            vendors[current][1][device_id] = Device(id=device_id, name=match.group(2).strip())

    return Dataset(
        {
            vendor_id: Vendor(id=vendor_id, name=name, devices=devices)
            for vendor_id, (name, devices) in vendors.items()
        }
    )
