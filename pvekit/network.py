"""QEMU network, NUMA and host PCI device settings."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from pvekit.propstring import flag, join_values, parse_pairs

_INTEGER = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def _to_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _to_float(text: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise ValueError(f"invalid number: {text!r}")
    return float(text)


@dataclass
class CustomNetworkDevice:
    """QEMU network device parameters."""

    model: str = ""
    bridge: str | None = None
    enabled: bool = False
    firewall: bool | None = None
    link_down: bool | None = None
    mac_address: str | None = None
    queues: int | None = None
    rate_limit: float | None = None
    tag: int | None = None
    mtu: int | None = None
    trunks: list[int] = field(default_factory=list)

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"model={self.model}"]
        if self.bridge is not None:
            values.append(f"bridge={self.bridge}")
        if self.firewall is not None:
            values.append(flag("firewall", self.firewall))
        if self.link_down is not None:
            values.append(flag("link_down", self.link_down))
        if self.mac_address is not None:
            values.append(f"macaddr={self.mac_address}")
        if self.queues is not None:
            values.append(f"queues={int(self.queues)}")
        if self.rate_limit is not None:
            values.append(f"rate={float(self.rate_limit):f}")
        if self.tag is not None:
            values.append(f"tag={int(self.tag)}")
        if self.mtu is not None:
            values.append(f"mtu={int(self.mtu)}")
        if self.trunks:
            values.append(f"trunks={';'.join(str(int(t)) for t in self.trunks)}")
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomNetworkDevice:
        device = cls()
        for parts in parse_pairs(text):
            if len(parts) != 2:
                continue
            name, value = parts
            if name == "bridge":
                device.bridge = value
            elif name == "firewall":
                device.firewall = value == "1"
            elif name == "link_down":
                device.link_down = value == "1"
            elif name == "macaddr":
                device.mac_address = value
            elif name == "model":
                device.model = value
            elif name == "queues":
                device.queues = _to_int(value)
            elif name == "rate":
                device.rate_limit = _to_float(value)
            elif name == "mtu":
                device.mtu = _to_int(value)
            elif name == "tag":
                device.tag = _to_int(value)
            elif name == "trunks":
                device.trunks = [_to_int(trunk) for trunk in value.split(";")]
            else:
                # A bare "<model>=<mac address>" pair.
                device.mac_address = value
                device.model = name
        device.enabled = True
        return device


def encode_network_devices(
    devices: Iterable[CustomNetworkDevice], key: str
) -> dict[str, str]:
    """Encode the enabled network devices as numbered parameters."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        if device.enabled:
            params.update(device.to_params(f"{key}{index}"))
    return params


@dataclass
class CustomNUMADevice:
    """QEMU NUMA node parameters."""

    cpu_ids: list[str] = field(default_factory=list)
    host_node_names: list[str] | None = None
    memory: float | None = None
    policy: str | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"cpus={';'.join(self.cpu_ids)}"]
        if self.host_node_names is not None:
            values.append(f"hostnodes={';'.join(self.host_node_names)}")
        if self.memory is not None:
            values.append(f"memory={float(self.memory):f}")
        if self.policy is not None:
            values.append(f"policy={self.policy}")
        return {key: join_values(values)}


def encode_numa_devices(devices: Iterable[CustomNUMADevice], key: str) -> dict[str, str]:
    """Encode every NUMA node as a numbered parameter."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        params.update(device.to_params(f"{key}{index}"))
    return params


@dataclass
class CustomPCIDevice:
    """QEMU host PCI device mapping parameters."""

    device_ids: list[str] = field(default_factory=list)
    mdev: str | None = None
    pci_express: bool | None = None
    rombar: bool | None = None
    rom_file: str | None = None
    xvga: bool | None = None

    def to_params(self, key: str) -> dict[str, str]:
        values = [f"host={';'.join(self.device_ids)}"]
        if self.mdev is not None:
            values.append(f"mdev={self.mdev}")
        if self.pci_express is not None:
            values.append(flag("pcie", self.pci_express))
        if self.rombar is not None:
            values.append(flag("rombar", self.rombar))
        if self.rom_file is not None:
            values.append(f"romfile={self.rom_file}")
        if self.xvga is not None:
            values.append(flag("x-vga", self.xvga))
        return {key: join_values(values)}

    @classmethod
    def parse(cls, text: str) -> CustomPCIDevice:
        device = cls()
        for parts in parse_pairs(text):
            if len(parts) == 1:
                raise ValueError(f"missing value in PCI device property {parts[0]!r}")
            if len(parts) != 2:
                continue
            name, value = parts
            if name == "host":
                device.device_ids = value.split(";")
            elif name == "mdev":
                device.mdev = value
            elif name == "pcie":
                device.pci_express = value == "1"
            elif name == "rombar":
                device.rombar = value == "1"
            elif name == "romfile":
                device.rom_file = value
            elif name == "x-vga":
                device.xvga = value == "1"
        return device


def encode_pci_devices(devices: Iterable[CustomPCIDevice], key: str) -> dict[str, str]:
    """Encode every PCI mapping as a numbered parameter."""
    params: dict[str, str] = {}
    for index, device in enumerate(devices):
        params.update(device.to_params(f"{key}{index}"))
    return params