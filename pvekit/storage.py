"""QEMU storage device (IDE, SATA, SCSI, VirtIO disk) settings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from pvekit.propstring import flag, join_values, parse_pairs

_INTEGER = re.compile(r"[+-]?\d+")

_INT_FIELDS = {
    "mbps_rd": "max_read_speed_mbps",
    "mbps_rd_max": "burstable_read_speed_mbps",
    "mbps_wr": "max_write_speed_mbps",
    "mbps_wr_max": "burstable_write_speed_mbps",
}

_TEXT_FIELDS = {
    "aio": "aio",
    "file": "file_volume",
    "media": "media",
    "size": "size",
    "format": "format",
    "discard": "discard",
}

_BOOL_FIELDS = {
    "backup": "backup_enabled",
    "iothread": "iothread",
    "ssd": "ssd",
}


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _extension(path: str) -> str:
    """Return the extension of the last path element, dot included."""
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


@dataclass
class CustomStorageDevice:
    """QEMU storage device parameters."""

    aio: str | None = None
    backup_enabled: bool | None = None
    burstable_read_speed_mbps: int | None = None
    burstable_write_speed_mbps: int | None = None
    discard: str | None = None
    enabled: bool = False
    file_volume: str = ""
    format: str | None = None
    iothread: bool | None = None
    ssd: bool | None = None
    max_read_speed_mbps: int | None = None
    max_write_speed_mbps: int | None = None
    media: str | None = None
    size: str | None = None
    interface: str | None = None
    id: str | None = None
    file_id: str | None = None
    size_int: int | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"file={self.file_volume}"]
        if self.aio is not None:
            values.append(f"aio={self.aio}")
        if self.backup_enabled is not None:
            values.append(flag("backup", self.backup_enabled))
        for name, value in (
            ("mbps_rd_max", self.burstable_read_speed_mbps),
            ("mbps_wr_max", self.burstable_write_speed_mbps),
            ("mbps_rd", self.max_read_speed_mbps),
            ("mbps_wr", self.max_write_speed_mbps),
        ):
            if value is not None:
                values.append(f"{name}={int(value)}")
        if self.media is not None:
            values.append(f"media={self.media}")
        if self.size is not None:
            values.append(f"size={self.size}")
        if self.iothread is not None:
            values.append(flag("iothread", self.iothread))
        if self.ssd is not None:
            values.append(flag("ssd", self.ssd))
        if self.discard:
            values.append(f"discard={self.discard}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomStorageDevice:
        device = cls()
        for parts in parse_pairs(text):
            if len(parts) == 1:
                device.file_volume = parts[0]
                ext = _extension(parts[0])
                if ext:
                    device.format = ext[1:]
            elif len(parts) == 2:
                name, value = parts
                if name in _TEXT_FIELDS:
                    setattr(device, _TEXT_FIELDS[name], value)
                elif name in _BOOL_FIELDS:
                    setattr(device, _BOOL_FIELDS[name], value == "1")
                elif name in _INT_FIELDS:
                    setattr(device, _INT_FIELDS[name], _to_int(value))
        device.enabled = True
        return device


def encode_storage_devices(devices: Mapping[str, CustomStorageDevice]) -> dict[str, str]:
    """Encode the enabled devices, each under its own key."""
    params: dict[str, str] = {}
    for key, device in devices.items():
        if device.enabled:
            params.update(device.to_params(key))
    return params