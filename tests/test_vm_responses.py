import pytest

from pvekit.vm_responses import (
    NetworkInterface,
    VMConfig,
    VMStatus,
    parse_network_interfaces,
)


def test_config_storage_device():
    config = VMConfig.from_dict({"scsi0": "local-lvm:vm-100-disk-0,size=8G,ssd=1"})
    device = config.scsi_devices["scsi0"]
    assert device.file_volume == "local-lvm:vm-100-disk-0"
    assert device.size == "8G"
    assert device.ssd is True
    assert device.enabled is True


def test_config_ignores_slots_past_limit():
    config = VMConfig.from_dict({"scsi14": "local:1", "ide4": "local:2", "net8": "x=y"})
    assert config.scsi_devices == {}
    assert config.ide_devices == {}
    assert config.network_devices == {}


def test_config_network_device():
    config = VMConfig.from_dict({"net0": "virtio=DE:AD:BE:EF:00:01,bridge=vmbr0"})
    device = config.network_devices["net0"]
    assert device.model == "virtio"
    assert device.mac_address == "DE:AD:BE:EF:00:01"
    assert device.bridge == "vmbr0"


def test_config_scalars():
    config = VMConfig.from_dict(
        {"acpi": 1, "cores": 4, "name": "web", "onboot": 0, "migrate_downtime": 0.5}
    )
    assert config.acpi is True
    assert config.cpu_cores == 4
    assert config.name == "web"
    assert config.start_on_boot is False
    assert config.migrate_downtime == 0.5


def test_config_null_values_stay_unset():
    config = VMConfig.from_dict({"name": None, "agent": None})
    assert config.name is None
    assert config.agent is None


@pytest.mark.parametrize("data", [{"cores": "4"}, {"name": 5}, {"cores": 4.5}])
def test_config_wrong_types_raise(data):
    with pytest.raises(ValueError):
        VMConfig.from_dict(data)


def test_config_empty_cpu_raises():
    with pytest.raises(ValueError):
        VMConfig.from_dict({"cpu": ""})


def test_config_ssh_keys_are_decoded():
    config = VMConfig.from_dict({"sshkeys": "ssh-ed25519%20AAAA%0Assh-rsa%20BBBB"})
    assert config.cloud_init_ssh_keys == ["ssh-ed25519 AAAA", "ssh-rsa BBBB"]


def test_config_agent_and_ipconfig():
    config = VMConfig.from_dict({"agent": "1,type=virtio", "ipconfig0": "ip=dhcp"})
    assert config.agent.enabled is True
    assert config.agent.type == "virtio"
    assert config.ip_configs["ipconfig0"].ipv4 == "dhcp"


def test_config_serial_devices_kept_as_text():
    config = VMConfig.from_dict({"serial0": "socket", "serial4": "socket"})
    assert config.serial_devices == {"serial0": "socket"}


def test_config_efi_disk_file_and_format():
    config = VMConfig.from_dict({"efidisk0": "file=local:vm-100-disk-1,format=raw"})
    assert config.efi_disk.file_volume == "local:vm-100-disk-1"
    assert config.efi_disk.format == "raw"


def test_config_object_fields():
    config = VMConfig.from_dict(
        {
            "startup": {"order": 1, "up": 30},
            "usb": [{"host": "1234:5678", "usb3": 1}],
            "numa_devices": [{"cpus": ["0-1"], "memory": 512}],
        }
    )
    assert config.startup_order.order == 1
    assert config.startup_order.up == 30
    assert config.startup_order.down is None
    assert config.usb_devices[0].host_device == "1234:5678"
    assert config.usb_devices[0].usb3 is True
    assert config.numa_devices[0].cpu_ids == ["0-1"]
    assert config.numa_devices[0].memory == 512.0


def test_status_from_dict():
    status = VMStatus.from_dict({"status": "running", "vmid": 100, "cpus": 2, "agent": 1})
    assert status.status == "running"
    assert status.vmid == 100
    assert status.cpu_count == 2.0
    assert status.agent_enabled is True


def test_status_defaults():
    status = VMStatus.from_dict({})
    assert status.status == ""
    assert status.uptime is None


def test_parse_network_interfaces():
    body = {
        "data": {
            "result": [
                {
                    "hardware-address": "DE:AD:BE:EF:00:02",
                    "name": "eth0",
                    "ip-addresses": [
                        {"ip-address": "192.0.2.10", "prefix": 24, "ip-address-type": "ipv4"}
                    ],
                    "statistics": {"rx-bytes": 10, "tx-errs": 3},
                }
            ]
        }
    }
    interfaces = parse_network_interfaces(body)
    assert len(interfaces) == 1
    interface = interfaces[0]
    assert interface.name == "eth0"
    assert interface.mac_address == "DE:AD:BE:EF:00:02"
    assert interface.ip_addresses[0].address == "192.0.2.10"
    assert interface.ip_addresses[0].prefix == 24
    assert interface.ip_addresses[0].type == "ipv4"
    assert interface.statistics.rx_bytes == 10
    assert interface.statistics.tx_errors == 3
    assert interface.statistics.rx_packets == 0


def test_parse_network_interfaces_missing_parts():
    assert parse_network_interfaces({}) is None
    assert parse_network_interfaces({"data": {}}) is None


def test_network_interface_defaults():
    interface = NetworkInterface.from_dict({})
    assert interface.mac_address == ""
    assert interface.name == ""
    assert interface.statistics is None
    assert interface.ip_addresses is None