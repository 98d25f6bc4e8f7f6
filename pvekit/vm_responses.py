"""Response bodies of the virtual machine endpoints."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pvekit.cloudinit import (
    CustomCloudInitFiles,
    CustomCloudInitIPConfig,
    parse_ssh_keys,
)
from pvekit.devices import (
    CustomAgent,
    CustomAudioDevice,
    CustomCPUEmulation,
    CustomEFIDisk,
    CustomSharedMemory,
    CustomSMBIOS,
)
from pvekit.misc_devices import (
    CustomSpiceEnhancements,
    CustomStartupOrder,
    CustomUSBDevice,
    CustomVGADevice,
    CustomWatchdogDevice,
)
from pvekit.network import CustomNetworkDevice, CustomNUMADevice, CustomPCIDevice
from pvekit.propstring import parse_pairs
from pvekit.storage import CustomStorageDevice


def _str(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {value!r}")
    return value


def _float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str) and value in ("0", "1"):
        return value == "1"
    raise ValueError(f"expected a boolean, got {value!r}")


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {value!r}")
    return [_str(item) for item in value]


def _mapping(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"expected an object, got {value!r}")
    return value


def _opt(data: Mapping[str, Any], key: str, conv: Callable[[Any], Any]) -> Any:
    value = data.get(key)
    return None if value is None else conv(value)


def _from_text(parser: Callable[[str], Any]) -> Callable[[Any], Any]:
    return lambda value: parser(_str(value))


def _parse_efi_disk(text: str) -> CustomEFIDisk:
    # Only the file and format properties are read here.
    disk = CustomEFIDisk()
    for parts in parse_pairs(text):
        if len(parts) != 2:
            continue
        name, value = parts
        if name == "format":
            disk.format = value
        elif name == "file":
            disk.file_volume = value
    return disk


def _numa_device(value: Any) -> CustomNUMADevice:
    data = _mapping(value)
    return CustomNUMADevice(
        cpu_ids=_opt(data, "cpus", _str_list) or [],
        host_node_names=_opt(data, "hostnodes", _str_list),
        memory=_opt(data, "memory", _float),
        policy=_opt(data, "policy", _str),
    )


def _usb_device(value: Any) -> CustomUSBDevice:
    data = _mapping(value)
    return CustomUSBDevice(
        host_device=_opt(data, "host", _str) or "",
        usb3=_opt(data, "usb3", _bool),
    )


def _spice(value: Any) -> CustomSpiceEnhancements:
    data = _mapping(value)
    return CustomSpiceEnhancements(
        folder_sharing=_opt(data, "foldersharing", _bool),
        video_streaming=_opt(data, "videostreaming", _str),
    )


def _startup(value: Any) -> CustomStartupOrder:
    data = _mapping(value)
    return CustomStartupOrder(
        down=_opt(data, "down", _int),
        order=_opt(data, "order", _int),
        up=_opt(data, "up", _int),
    )


def _list_of(conv: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    def convert(value: Any) -> list[Any]:
        if not isinstance(value, list):
            raise ValueError(f"expected a list, got {value!r}")
        return [conv(item) for item in value]

    return convert


_CONFIG_FIELDS: tuple[tuple[str, str, Callable[[Any], Any]], ...] = (
    ("acpi", "acpi", _bool),
    ("agent", "agent", _from_text(CustomAgent.parse)),
    ("reboot", "allow_reboot", _bool),
    ("audio0", "audio_device", _from_text(CustomAudioDevice.parse)),
    ("autostart", "autostart", _bool),
    ("archive", "backup_file", _str),
    ("bwlimit", "bandwidth_limit", _int),
    ("bios", "bios", _str),
    ("bootdisk", "boot_disk", _str),
    ("boot", "boot_order", _str),
    ("cdrom", "cdrom", _str),
    ("searchdomain", "cloud_init_dns_domain", _str),
    ("nameserver", "cloud_init_dns_server", _str),
    ("cicustom", "cloud_init_files", _from_text(CustomCloudInitFiles.parse)),
    ("cipassword", "cloud_init_password", _str),
    ("sshkeys", "cloud_init_ssh_keys", _from_text(parse_ssh_keys)),
    ("citype", "cloud_init_type", _str),
    ("ciuser", "cloud_init_username", _str),
    ("arch", "cpu_architecture", _str),
    ("cores", "cpu_cores", _int),
    ("cpu", "cpu_emulation", _from_text(CustomCPUEmulation.parse)),
    ("cpulimit", "cpu_limit", _int),
    ("sockets", "cpu_sockets", _int),
    ("cpuunits", "cpu_units", _int),
    ("memory", "dedicated_memory", _int),
    ("protection", "deletion_protection", _bool),
    ("description", "description", _str),
    ("efidisk0", "efi_disk", _from_text(_parse_efi_disk)),
    ("balloon", "floating_memory", _int),
    ("shares", "floating_memory_shares", _int),
    ("freeze", "freeze", _bool),
    ("hookscript", "hook_script", _str),
    ("hotplug", "hotplug", _str),
    ("hugepages", "hugepages", _str),
    ("keyboard", "keyboard_layout", _str),
    ("args", "kvm_arguments", _str),
    ("kvm", "kvm_enabled", _bool),
    ("localtime", "local_time", _bool),
    ("lock", "lock", _str),
    ("machine", "machine", _str),
    ("migrate_downtime", "migrate_downtime", _float),
    ("migrate_speed", "migrate_speed", _int),
    ("name", "name", _str),
    ("numa_devices", "numa_devices", _list_of(_numa_device)),
    ("numa", "numa_enabled", _bool),
    ("ostype", "os_type", _str),
    ("force", "overwrite", _bool),
    ("pool", "pool_id", _str),
    ("revert", "revert", _str),
    ("scsihw", "scsi_hardware", _str),
    ("ivshmem", "shared_memory", _from_text(CustomSharedMemory.parse)),
    ("skiplock", "skip_lock", _bool),
    ("smbios1", "smbios", _from_text(CustomSMBIOS.parse)),
    ("spice_enhancements", "spice_enhancements", _spice),
    ("startdate", "start_date", _str),
    ("onboot", "start_on_boot", _bool),
    ("startup", "startup_order", _startup),
    ("tablet", "tablet_device_enabled", _bool),
    ("tags", "tags", _str),
    ("template", "template", _bool),
    ("tdf", "time_drift_fix_enabled", _bool),
    ("usb", "usb_devices", _list_of(_usb_device)),
    ("vga", "vga_device", _from_text(CustomVGADevice.parse)),
    ("vcpus", "virtual_cpu_count", _int),
    ("vmgenid", "vm_generation_id", _str),
    ("vmstatestorage", "vm_state_datastore_id", _str),
    ("watchdog", "watchdog_device", _from_text(CustomWatchdogDevice.parse)),
)

# (key prefix, number of slots, attribute, parser)
_INDEXED_FIELDS: tuple[tuple[str, int, str, Callable[[Any], Any]], ...] = (
    ("ide", 4, "ide_devices", _from_text(CustomStorageDevice.parse)),
    ("ipconfig", 8, "ip_configs", _from_text(CustomCloudInitIPConfig.parse)),
    ("net", 8, "network_devices", _from_text(CustomNetworkDevice.parse)),
    ("hostpci", 4, "pci_devices", _from_text(CustomPCIDevice.parse)),
    ("sata", 6, "sata_devices", _from_text(CustomStorageDevice.parse)),
    ("scsi", 14, "scsi_devices", _from_text(CustomStorageDevice.parse)),
    ("serial", 4, "serial_devices", _str),
    ("virtio", 16, "virtual_io_devices", _from_text(CustomStorageDevice.parse)),
)


@dataclass
class VMConfig:
    """Configuration of a virtual machine as returned by the API.

    Numbered devices are kept in dictionaries keyed by their API name,
    such as ``scsi0`` or ``net1``.
    """

    acpi: bool | None = None
    agent: CustomAgent | None = None
    allow_reboot: bool | None = None
    audio_device: CustomAudioDevice | None = None
    autostart: bool | None = None
    backup_file: str | None = None
    bandwidth_limit: int | None = None
    bios: str | None = None
    boot_disk: str | None = None
    boot_order: str | None = None
    cdrom: str | None = None
    cloud_init_dns_domain: str | None = None
    cloud_init_dns_server: str | None = None
    cloud_init_files: CustomCloudInitFiles | None = None
    cloud_init_password: str | None = None
    cloud_init_ssh_keys: list[str] | None = None
    cloud_init_type: str | None = None
    cloud_init_username: str | None = None
    cpu_architecture: str | None = None
    cpu_cores: int | None = None
    cpu_emulation: CustomCPUEmulation | None = None
    cpu_limit: int | None = None
    cpu_sockets: int | None = None
    cpu_units: int | None = None
    dedicated_memory: int | None = None
    deletion_protection: bool | None = None
    description: str | None = None
    efi_disk: CustomEFIDisk | None = None
    floating_memory: int | None = None
    floating_memory_shares: int | None = None
    freeze: bool | None = None
    hook_script: str | None = None
    hotplug: str | None = None
    hugepages: str | None = None
    keyboard_layout: str | None = None
    kvm_arguments: str | None = None
    kvm_enabled: bool | None = None
    local_time: bool | None = None
    lock: str | None = None
    machine: str | None = None
    migrate_downtime: float | None = None
    migrate_speed: int | None = None
    name: str | None = None
    numa_devices: list[CustomNUMADevice] | None = None
    numa_enabled: bool | None = None
    os_type: str | None = None
    overwrite: bool | None = None
    pool_id: str | None = None
    revert: str | None = None
    scsi_hardware: str | None = None
    shared_memory: CustomSharedMemory | None = None
    skip_lock: bool | None = None
    smbios: CustomSMBIOS | None = None
    spice_enhancements: CustomSpiceEnhancements | None = None
    start_date: str | None = None
    start_on_boot: bool | None = None
    startup_order: CustomStartupOrder | None = None
    tablet_device_enabled: bool | None = None
    tags: str | None = None
    template: bool | None = None
    time_drift_fix_enabled: bool | None = None
    usb_devices: list[CustomUSBDevice] | None = None
    vga_device: CustomVGADevice | None = None
    virtual_cpu_count: int | None = None
    vm_generation_id: str | None = None
    vm_state_datastore_id: str | None = None
    watchdog_device: CustomWatchdogDevice | None = None
    ide_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    ip_configs: dict[str, CustomCloudInitIPConfig] = field(default_factory=dict)
    network_devices: dict[str, CustomNetworkDevice] = field(default_factory=dict)
    pci_devices: dict[str, CustomPCIDevice] = field(default_factory=dict)
    sata_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    scsi_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    serial_devices: dict[str, str] = field(default_factory=dict)
    virtual_io_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VMConfig:
        """Build a configuration from the ``data`` object of a config response."""
        kwargs: dict[str, Any] = {
            attr: _opt(data, key, conv) for key, attr, conv in _CONFIG_FIELDS
        }
        for prefix, slots, attr, conv in _INDEXED_FIELDS:
            kwargs[attr] = {
                f"{prefix}{index}": conv(data[f"{prefix}{index}"])
                for index in range(slots)
                if data.get(f"{prefix}{index}") is not None
            }
        return cls(**kwargs)


@dataclass
class VMStatus:
    """Current status of a virtual machine."""

    agent_enabled: bool | None = None
    cpu_count: float | None = None
    lock: str | None = None
    memory_allocation: int | None = None
    name: str | None = None
    pid: int | None = None
    qmp_status: str | None = None
    root_disk_size: int | None = None
    spice_support: bool | None = None
    status: str = ""
    tags: str | None = None
    uptime: int | None = None
    vmid: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VMStatus:
        return cls(
            agent_enabled=_opt(data, "agent", _bool),
            cpu_count=_opt(data, "cpus", _float),
            lock=_opt(data, "lock", _str),
            memory_allocation=_opt(data, "maxmem", _int),
            name=_opt(data, "name", _str),
            pid=_opt(data, "pid", _int),
            qmp_status=_opt(data, "qmpstatus", _str),
            root_disk_size=_opt(data, "maxdisk", _int),
            spice_support=_opt(data, "spice", _bool),
            status=_opt(data, "status", _str) or "",
            tags=_opt(data, "tags", _str),
            uptime=_opt(data, "uptime", _int),
            vmid=_opt(data, "vmid", _int),
        )


@dataclass
class NetworkInterfaceAddress:
    """An IP address reported by the guest agent."""

    address: str = ""
    prefix: int = 0
    type: str = ""


@dataclass
class NetworkInterfaceStatistics:
    """Traffic counters of a guest network interface."""

    rx_bytes: int = 0
    rx_dropped: int = 0
    rx_errors: int = 0
    rx_packets: int = 0
    tx_bytes: int = 0
    tx_dropped: int = 0
    tx_errors: int = 0
    tx_packets: int = 0


_STATISTICS_KEYS = (
    ("rx-bytes", "rx_bytes"),
    ("rx-dropped", "rx_dropped"),
    ("rx-errs", "rx_errors"),
    ("rx-packets", "rx_packets"),
    ("tx-bytes", "tx_bytes"),
    ("tx-dropped", "tx_dropped"),
    ("tx-errs", "tx_errors"),
    ("tx-packets", "tx_packets"),
)


def _statistics(value: Any) -> NetworkInterfaceStatistics:
    data = _mapping(value)
    return NetworkInterfaceStatistics(
        **{attr: _opt(data, key, _int) or 0 for key, attr in _STATISTICS_KEYS}
    )


def _address(value: Any) -> NetworkInterfaceAddress:
    data = _mapping(value)
    return NetworkInterfaceAddress(
        address=_opt(data, "ip-address", _str) or "",
        prefix=_opt(data, "prefix", _int) or 0,
        type=_opt(data, "ip-address-type", _str) or "",
    )


@dataclass
class NetworkInterface:
    """A guest network interface reported by the guest agent."""

    mac_address: str = ""
    name: str = ""
    statistics: NetworkInterfaceStatistics | None = None
    ip_addresses: list[NetworkInterfaceAddress] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NetworkInterface:
        return cls(
            mac_address=_opt(data, "hardware-address", _str) or "",
            name=_opt(data, "name", _str) or "",
            statistics=_opt(data, "statistics", _statistics),
            ip_addresses=_opt(data, "ip-addresses", _list_of(_address)),
        )


def parse_network_interfaces(data: Mapping[str, Any]) -> list[NetworkInterface] | None:
    """Read the interfaces from a network interfaces response body.

    Returns ``None`` when the body carries no data or no result.
    """
    payload = data.get("data")
    if payload is None:
        return None
    return _opt(
        _mapping(payload),
        "result",
        _list_of(lambda item: NetworkInterface.from_dict(_mapping(item))),
    )