"""Request bodies of the virtual machine endpoints, encoded as form parameters."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, auto

from pvekit.cloudinit import CustomCloudInitConfig
from pvekit.devices import (
    CustomAgent,
    CustomAudioDevice,
    CustomCPUEmulation,
    CustomEFIDisk,
    CustomSharedMemory,
    CustomSMBIOS,
    encode_audio_devices,
)
from pvekit.misc_devices import (
    CustomSpiceEnhancements,
    CustomStartupOrder,
    CustomUSBDevice,
    CustomVGADevice,
    CustomWatchdogDevice,
    encode_serial_devices,
    encode_usb_devices,
)
from pvekit.network import (
    CustomNetworkDevice,
    CustomNUMADevice,
    CustomPCIDevice,
    encode_network_devices,
    encode_numa_devices,
    encode_pci_devices,
)
from pvekit.storage import CustomStorageDevice, encode_storage_devices


class _Kind(Enum):
    VALUE = auto()
    INT_BOOL = auto()
    TEXT_BOOL = auto()
    FLOAT = auto()
    COMMA = auto()


def _format_float(value: float) -> str:
    """Render a float in shortest form, switching to exponent form outside 1e-4..1e21."""
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    sign, digits, exponent = Decimal(repr(number)).normalize().as_tuple()
    prefix = "-" if sign else ""
    magnitude = len(digits) - 1 + exponent
    text = "".join(str(d) for d in digits)
    if -4 <= magnitude < 21:
        return prefix + format(Decimal(repr(abs(number))).normalize(), "f")
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    exp_sign = "+" if magnitude >= 0 else "-"
    return f"{prefix}{mantissa}e{exp_sign}{abs(magnitude):02d}"


def _encode_value(value: object, kind: _Kind) -> str | None:
    if value is None:
        return None
    if kind is _Kind.INT_BOOL:
        return "1" if value else "0"
    if kind is _Kind.TEXT_BOOL:
        return "true" if value else "false"
    if kind is _Kind.FLOAT:
        return _format_float(value)  # type: ignore[arg-type]
    if kind is _Kind.COMMA:
        items = list(value)  # type: ignore[call-overload]
        return ",".join(items) if items else None
    return str(value)


def _encode_fields(obj: object, table: Iterable[tuple[str, str, _Kind]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for attr, key, kind in table:
        encoded = _encode_value(getattr(obj, attr), kind)
        if encoded is not None:
            params[key] = encoded
    return params


_V, _IB, _TB, _F, _C = _Kind.VALUE, _Kind.INT_BOOL, _Kind.TEXT_BOOL, _Kind.FLOAT, _Kind.COMMA

# The deletion protection flag shares the "force" parameter with the overwrite flag.
_CREATE_FIELDS = (
    ("acpi", "acpi", _IB),
    ("allow_reboot", "reboot", _IB),
    ("autostart", "autostart", _IB),
    ("backup_file", "archive", _V),
    ("bandwidth_limit", "bwlimit", _V),
    ("bios", "bios", _V),
    ("boot_disk", "bootdisk", _V),
    ("boot_order", "boot", _V),
    ("cdrom", "cdrom", _V),
    ("cpu_architecture", "arch", _V),
    ("cpu_cores", "cores", _V),
    ("cpu_limit", "cpulimit", _V),
    ("cpu_sockets", "sockets", _V),
    ("cpu_units", "cpuunits", _V),
    ("dedicated_memory", "memory", _V),
    ("delete", "delete", _C),
    ("deletion_protection", "force", _IB),
    ("description", "description", _V),
    ("floating_memory", "balloon", _V),
    ("floating_memory_shares", "shares", _V),
    ("freeze", "freeze", _IB),
    ("hook_script", "hookscript", _V),
    ("hotplug", "hotplug", _C),
    ("hugepages", "hugepages", _V),
    ("keyboard_layout", "keyboard", _V),
    ("kvm_arguments", "args", _V),
    ("kvm_enabled", "kvm", _IB),
    ("local_time", "localtime", _IB),
    ("lock", "lock", _V),
    ("machine", "machine", _V),
    ("migrate_downtime", "migrate_downtime", _F),
    ("migrate_speed", "migrate_speed", _V),
    ("name", "name", _V),
    ("numa_enabled", "numa", _IB),
    ("os_type", "ostype", _V),
    ("overwrite", "force", _IB),
    ("pool_id", "pool", _V),
    ("revert", "revert", _V),
    ("scsi_hardware", "scsihw", _V),
    ("skip_lock", "skiplock", _IB),
    ("start_date", "startdate", _V),
    ("start_on_boot", "onboot", _IB),
    ("tablet_device_enabled", "tablet", _IB),
    ("tags", "tags", _V),
    ("template", "template", _IB),
    ("time_drift_fix_enabled", "tdf", _IB),
    ("virtual_cpu_count", "vcpus", _V),
    ("vm_generation_id", "vmgenid", _V),
    ("vmid", "vmid", _V),
    ("vm_state_datastore_id", "vmstatestorage", _V),
)

_CREATE_NESTED = (
    ("agent", "agent"),
    ("cpu_emulation", "cpu"),
    ("efi_disk", "efidisk0"),
    ("shared_memory", "ivshmem"),
    ("smbios", "smbios1"),
    ("spice_enhancements", "spice_enhancements"),
    ("startup_order", "startup"),
    ("vga_device", "vga"),
    ("watchdog_device", "watchdog"),
)


@dataclass
class VMCreateRequest:
    """Settings for creating or updating a virtual machine."""

    acpi: bool | None = None
    agent: CustomAgent | None = None
    allow_reboot: bool | None = None
    audio_devices: list[CustomAudioDevice] = field(default_factory=list)
    autostart: bool | None = None
    backup_file: str | None = None
    bandwidth_limit: int | None = None
    bios: str | None = None
    boot_disk: str | None = None
    boot_order: str | None = None
    cdrom: str | None = None
    cloud_init_config: CustomCloudInitConfig | None = None
    cpu_architecture: str | None = None
    cpu_cores: int | None = None
    cpu_emulation: CustomCPUEmulation | None = None
    cpu_limit: int | None = None
    cpu_sockets: int | None = None
    cpu_units: int | None = None
    dedicated_memory: int | None = None
    delete: list[str] = field(default_factory=list)
    deletion_protection: bool | None = None
    description: str | None = None
    efi_disk: CustomEFIDisk | None = None
    floating_memory: int | None = None
    floating_memory_shares: int | None = None
    freeze: bool | None = None
    hook_script: str | None = None
    hotplug: list[str] = field(default_factory=list)
    hugepages: str | None = None
    ide_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    keyboard_layout: str | None = None
    kvm_arguments: str | None = None
    kvm_enabled: bool | None = None
    local_time: bool | None = None
    lock: str | None = None
    machine: str | None = None
    migrate_downtime: float | None = None
    migrate_speed: int | None = None
    name: str | None = None
    network_devices: list[CustomNetworkDevice] = field(default_factory=list)
    numa_devices: list[CustomNUMADevice] = field(default_factory=list)
    numa_enabled: bool | None = None
    os_type: str | None = None
    overwrite: bool | None = None
    pci_devices: list[CustomPCIDevice] = field(default_factory=list)
    pool_id: str | None = None
    revert: str | None = None
    sata_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    scsi_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    scsi_hardware: str | None = None
    serial_devices: list[str] = field(default_factory=list)
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
    usb_devices: list[CustomUSBDevice] = field(default_factory=list)
    vga_device: CustomVGADevice | None = None
    virtual_cpu_count: int | None = None
    virtual_io_devices: dict[str, CustomStorageDevice] = field(default_factory=dict)
    vm_generation_id: str | None = None
    vmid: int | None = None
    vm_state_datastore_id: str | None = None
    watchdog_device: CustomWatchdogDevice | None = None

    def to_params(self) -> dict[str, str]:
        """Return the form parameters for this request."""
        params = _encode_fields(self, _CREATE_FIELDS)
        for attr, key in _CREATE_NESTED:
            value = getattr(self, attr)
            if value is not None:
                params.update(value.to_params(key))
        if self.cloud_init_config is not None:
            params.update(self.cloud_init_config.to_params())
        params.update(encode_audio_devices(self.audio_devices, "audio"))
        params.update(encode_network_devices(self.network_devices, "net"))
        params.update(encode_numa_devices(self.numa_devices, "numa"))
        params.update(encode_pci_devices(self.pci_devices, "hostpci"))
        params.update(encode_serial_devices(self.serial_devices, "serial"))
        params.update(encode_usb_devices(self.usb_devices, "usb"))
        for devices in (
            self.ide_devices,
            self.sata_devices,
            self.scsi_devices,
            self.virtual_io_devices,
        ):
            params.update(encode_storage_devices(devices))
        return params


VMUpdateRequest = VMCreateRequest


@dataclass
class VMCloneRequest:
    """Settings for cloning a virtual machine."""

    vmid_new: int
    bandwidth_limit: int | None = None
    description: str | None = None
    full_copy: bool | None = None
    name: str | None = None
    pool_id: str | None = None
    snapshot_name: str | None = None
    target_node_name: str | None = None
    target_storage: str | None = None
    target_storage_format: str | None = None

    _FIELDS = (
        ("bandwidth_limit", "bwlimit", _V),
        ("description", "description", _V),
        ("full_copy", "full", _IB),
        ("name", "name", _V),
        ("pool_id", "pool", _V),
        ("snapshot_name", "snapname", _V),
        ("target_node_name", "target", _V),
        ("target_storage", "storage", _V),
        ("target_storage_format", "format", _V),
        ("vmid_new", "newid", _V),
    )

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, self._FIELDS)


@dataclass
class VMMigrateRequest:
    """Settings for migrating a virtual machine to another node."""

    target_node: str
    online_migration: bool | None = None
    target_storage: str | None = None
    with_local_disks: bool | None = None

    _FIELDS = (
        ("online_migration", "online", _TB),
        ("target_node", "target", _V),
        ("target_storage", "targetstorage", _V),
        ("with_local_disks", "with-local-disks", _IB),
    )

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, self._FIELDS)


@dataclass
class VMMoveDiskRequest:
    """Settings for moving a disk to another storage."""

    disk: str
    target_storage: str
    bandwidth_limit: int | None = None
    delete_original_disk: bool | None = None
    digest: str | None = None
    target_storage_format: str | None = None

    _FIELDS = (
        ("bandwidth_limit", "bwlimit", _V),
        ("delete_original_disk", "delete", _IB),
        ("digest", "digest", _V),
        ("disk", "disk", _V),
        ("target_storage", "storage", _V),
        ("target_storage_format", "format", _V),
    )

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, self._FIELDS)


@dataclass
class VMRebootRequest:
    """Settings for rebooting a virtual machine."""

    timeout: int | None = None

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, (("timeout", "timeout", _V),))


@dataclass
class VMResizeDiskRequest:
    """Settings for resizing a disk."""

    disk: str
    size: str
    digest: str | None = None
    skip_lock: bool | None = None

    _FIELDS = (
        ("digest", "digest", _V),
        ("disk", "disk", _V),
        ("size", "size", _V),
        ("skip_lock", "skiplock", _IB),
    )

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, self._FIELDS)


@dataclass
class VMShutdownRequest:
    """Settings for shutting down a virtual machine."""

    force_stop: bool | None = None
    keep_active: bool | None = None
    skip_lock: bool | None = None
    timeout: int | None = None

    _FIELDS = (
        ("force_stop", "forceStop", _IB),
        ("keep_active", "keepActive", _IB),
        ("skip_lock", "skipLock", _IB),
        ("timeout", "timeout", _V),
    )

    def to_params(self) -> dict[str, str]:
        return _encode_fields(self, self._FIELDS)