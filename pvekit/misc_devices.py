"""QEMU spice, startup order, USB, VGA, watchdog, VirtIO and serial settings."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from pvekit.propstring import flag, join_values, parse_pairs

_INTEGER = re.compile(r"[+-]?\d+")


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _params_if_any(key: str, values: list[str]) -> dict[str, str]:
    return {key: join_values(values)} if values else {}


@dataclass
class CustomSpiceEnhancements:
    """QEMU spice enhancement parameters."""

    folder_sharing: bool | None = None
    video_streaming: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = []
        if self.folder_sharing is not None:
            values.append(flag("foldersharing", self.folder_sharing))
        if self.video_streaming is not None:
            values.append(f"videostreaming={self.video_streaming}")
        return _params_if_any(key, values)


@dataclass
class CustomStartupOrder:
    """QEMU startup order parameters."""

    down: int | None = None
    order: int | None = None
    up: int | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [
            f"{name}={int(value)}"
            for name, value in (("order", self.order), ("up", self.up), ("down", self.down))
            if value is not None
        ]
        return _params_if_any(key, values)


@dataclass
class CustomUSBDevice:
    """QEMU USB device parameters."""

    host_device: str = ""
    usb3: bool | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"host={self.host_device}"]
        if self.usb3 is not None:
            values.append(flag("usb3", self.usb3))
        return {key: join_values(values)}


def encode_usb_devices(devices: Iterable[CustomUSBDevice], key: str) -> dict[str, str]:
    """Encode every USB device as a numbered parameter."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        params.update(device.to_params(f"{key}{index}"))
    return params


@dataclass
class CustomVGADevice:
    """QEMU VGA device parameters."""

    memory: int | None = None
    type: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = []
        if self.memory is not None:
            values.append(f"memory={int(self.memory)}")
        if self.type is not None:
            values.append(f"type={self.type}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomVGADevice:
        vga = cls()
        if text == "":
            return vga
        for parts in parse_pairs(text):
            if len(parts) == 1:
                vga.type = parts[0]
            elif len(parts) == 2:
                name, value = parts
                if name == "memory":
                    vga.memory = _to_int(value)
                elif name == "type":
                    vga.type = value
        return vga


@dataclass
class CustomWatchdogDevice:
    """QEMU watchdog device parameters."""

    model: str | None = None
    action: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        model = self.model if self.model is not None else ""
        values = [f"model={model}"]
        if self.action is not None:
            values.append(f"action={self.action}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomWatchdogDevice:
        watchdog = cls()
        if text == "":
            return watchdog
        for parts in parse_pairs(text):
            if len(parts) == 1:
                watchdog.model = parts[0]
            elif len(parts) == 2:
                name, value = parts
                if name == "action":
                    watchdog.action = value
                elif name == "model":
                    watchdog.model = value
        return watchdog


@dataclass
class CustomVirtualIODevice:
    """QEMU VirtIO device parameters."""

    file_volume: str = ""
    aio: str | None = None
    backup_enabled: bool | None = None
    enabled: bool = False

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"file={self.file_volume}"]
        if self.aio is not None:
            values.append(f"aio={self.aio}")
        if self.backup_enabled is not None:
            values.append(flag("backup", self.backup_enabled))
        return {key: join_values(values)}


def encode_virtual_io_devices(
    devices: Iterable[CustomVirtualIODevice], key: str
) -> dict[str, str]:
    """Encode the enabled VirtIO devices as numbered parameters."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        if device.enabled:
            params.update(device.to_params(f"{key}{index}"))
    return params


def encode_serial_devices(devices: Iterable[str], key: str) -> dict[str, str]:
    """Encode serial device settings as numbered parameters."""
    return {f"{key}{index}": device for index, device in enumerate(devices)}