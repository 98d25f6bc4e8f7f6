"""QEMU agent, audio, CPU, EFI disk, shared memory and SMBIOS settings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pvekit.propstring import flag, join_values, parse_pairs


def _params_if_any(key: str, values: list[str]) -> dict[str, str]:
    return {key: join_values(values)} if values else {}


@dataclass
class CustomAgent:
    """QEMU guest agent parameters."""

    enabled: bool | None = None
    trim_cloned_disks: bool | None = None
    type: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = []
        if self.enabled is not None:
            values.append(flag("enabled", self.enabled))
        if self.trim_cloned_disks is not None:
            values.append(flag("fstrim_cloned_disks", self.trim_cloned_disks))
        if self.type is not None:
            values.append(f"type={self.type}")
        return _params_if_any(key, values)

    @classmethod
    def parse(cls, text: str) -> CustomAgent:
        agent = cls()
        for parts in parse_pairs(text):
            if len(parts) == 1:
                agent.enabled = parts[0] == "1"
            elif len(parts) == 2:
                name, value = parts
                if name == "enabled":
                    agent.enabled = value == "1"
                elif name == "fstrim_cloned_disks":
                    agent.trim_cloned_disks = value == "1"
                elif name == "type":
                    agent.type = value
        return agent


@dataclass
class CustomAudioDevice:
    """QEMU audio device parameters."""

    device: str = ""
    driver: str | None = None
    enabled: bool = False

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"device={self.device}"]
        if self.driver is not None:
            values.append(f"driver={self.driver}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomAudioDevice:
        audio = cls()
        for parts in parse_pairs(text):
            if len(parts) != 2:
                continue
            name, value = parts
            if name == "device":
                audio.device = value
            elif name == "driver":
                audio.driver = value
        return audio


def encode_audio_devices(devices: Iterable[CustomAudioDevice], key: str) -> dict[str, str]:
    """Encode the enabled audio devices as numbered parameters."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        if device.enabled:
            params.update(device.to_params(f"{key}{index}"))
    return params


@dataclass
class CustomCPUEmulation:
    """QEMU CPU emulation parameters."""

    type: str = ""
    flags: list[str] | None = None
    hidden: bool | None = None
    hv_vendor_id: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"cputype={self.type}"]
        if self.flags:
            values.append(f"flags={';'.join(self.flags)}")
        if self.hidden is not None:
            values.append(flag("hidden", self.hidden))
        if self.hv_vendor_id is not None:
            values.append(f"hv-vendor-id={self.hv_vendor_id}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomCPUEmulation:
        if text == "":
            raise ValueError("unexpected empty string")
        cpu = cls()
        for parts in parse_pairs(text):
            if len(parts) == 1:
                cpu.type = parts[0]
            elif len(parts) == 2:
                name, value = parts
                if name == "cputype":
                    cpu.type = value
                elif name == "flags":
                    cpu.flags = value.split(";") if value else []
                elif name == "hidden":
                    cpu.hidden = value == "1"
                elif name == "hv-vendor-id":
                    cpu.hv_vendor_id = value
        return cpu


@dataclass
class CustomEFIDisk:
    """QEMU EFI disk parameters."""

    file_volume: str = ""
    format: str | None = None
    disk_size: int | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"file={self.file_volume}"]
        if self.format is not None:
            values.append(f"format={self.format}")
        if self.disk_size is not None:
            values.append(f"size={int(self.disk_size)}")
        return {key: join_values(values)}


@dataclass
class CustomSharedMemory:
    """QEMU inter-VM shared memory parameters."""

    size: int = 0
    name: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"size={int(self.size)}"]
        if self.name is not None:
            values.append(f"name={self.name}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomSharedMemory:
        memory = cls()
        for parts in parse_pairs(text):
            if len(parts) != 2:
                continue
            name, value = parts
            if name == "name":
                memory.name = value
            elif name == "size":
                memory.size = int(value)
        return memory


_SMBIOS_TEXT_FIELDS = (
    "family",
    "manufacturer",
    "product",
    "serial",
    "sku",
    "uuid",
    "version",
)


@dataclass
class CustomSMBIOS:
    """QEMU SMBIOS type 1 parameters."""

    base64: bool | None = None
    family: str | None = None
    manufacturer: str | None = None
    product: str | None = None
    serial: str | None = None
    sku: str | None = None
    uuid: str | None = None
    version: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = []
        if self.base64 is not None:
            values.append(flag("base64", self.base64))
        for field_name in _SMBIOS_TEXT_FIELDS:
            value = getattr(self, field_name)
            if value is not None:
                values.append(f"{field_name}={value}")
        return _params_if_any(key, values)

    @classmethod
    def parse(cls, text: str) -> CustomSMBIOS:
        smbios = cls()
        for parts in parse_pairs(text):
            if len(parts) != 2:
                continue
            name, value = parts
            if name == "base64":
                smbios.base64 = value == "1"
            elif name in _SMBIOS_TEXT_FIELDS:
                setattr(smbios, name, value)
        return smbios