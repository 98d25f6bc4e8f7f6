import pytest

from pvekit.network import (
    CustomNetworkDevice,
    CustomNUMADevice,
    CustomPCIDevice,
    encode_network_devices,
    encode_numa_devices,
    encode_pci_devices,
)


def _full_network_device() -> CustomNetworkDevice:
    return CustomNetworkDevice(
        model="virtio",
        bridge="vmbr0",
        enabled=True,
        firewall=True,
        link_down=False,
        mac_address="12:34:56:78:9A:BC",
        queues=4,
        rate_limit=2.5,
        tag=100,
        mtu=1500,
        trunks=[10, 20, 30],
    )


def test_network_round_trip():
    device = _full_network_device()
    text = device.to_params("net0")["net0"]
    assert CustomNetworkDevice.parse(text) == device


def test_network_model_first():
    text = _full_network_device().to_params("net0")["net0"]
    assert text.split(",")[0] == "model=virtio"


def test_network_rate_uses_fixed_point():
    device = CustomNetworkDevice(model="e1000", rate_limit=1.0)
    assert device.to_params("net1") == {"net1": "model=e1000,rate=1.000000"}


def test_network_parse_model_mac_shorthand():
    device = CustomNetworkDevice.parse("virtio=12:34:56:78:9A:BC,bridge=vmbr1,firewall=1")
    assert device.model == "virtio"
    assert device.mac_address == "12:34:56:78:9A:BC"
    assert device.bridge == "vmbr1"
    assert device.firewall is True
    assert device.enabled is True


@pytest.mark.parametrize(
    "text",
    ["model=virtio,queues=many", "model=virtio,rate=fast", "model=virtio,tag=x", "trunks=1;x"],
)
def test_network_parse_rejects_bad_numbers(text):
    with pytest.raises(ValueError):
        CustomNetworkDevice.parse(text)


def test_network_parse_ignores_parts_without_single_equals():
    device = CustomNetworkDevice.parse("model=virtio,a=b=c,loose")
    assert device.model == "virtio"
    assert device.mac_address is None


def test_encode_network_devices_skips_disabled():
    devices = [
        CustomNetworkDevice(model="virtio", enabled=True),
        CustomNetworkDevice(model="virtio", enabled=False),
        CustomNetworkDevice(model="e1000", enabled=True),
    ]
    params = encode_network_devices(devices, "net")
    assert set(params) == {"net0", "net2"}
    assert params["net2"] == devices[2].to_params("x")["x"]


def test_numa_to_params():
    node = CustomNUMADevice(
        cpu_ids=["0-3"], host_node_names=["0"], memory=1024, policy="bind"
    )
    assert node.to_params("numa0") == {
        "numa0": "cpus=0-3,hostnodes=0,memory=1024.000000,policy=bind"
    }


def test_numa_optional_fields_omitted():
    node = CustomNUMADevice(cpu_ids=["0", "1"])
    (value,) = node.to_params("numa0").values()
    assert value.startswith("cpus=")
    assert "memory" not in value and "policy" not in value and "hostnodes" not in value


def test_encode_numa_devices_includes_all():
    nodes = [CustomNUMADevice(cpu_ids=["0"]), CustomNUMADevice(cpu_ids=["1"])]
    params = encode_numa_devices(nodes, "numa")
    assert sorted(params) == ["numa0", "numa1"]
    assert params["numa1"] == nodes[1].to_params("k")["k"]


def test_pci_round_trip():
    device = CustomPCIDevice(
        device_ids=["0000:01:00.0", "0000:01:00.1"],
        mdev="nvidia-63",
        pci_express=True,
        rombar=False,
        rom_file="vbios.bin",
        xvga=True,
    )
    text = device.to_params("hostpci0")["hostpci0"]
    assert CustomPCIDevice.parse(text) == device


def test_pci_parse_bare_value_fails():
    with pytest.raises(ValueError):
        CustomPCIDevice.parse("0000:01:00.0")


def test_encode_pci_devices_numbers_every_device():
    devices = [CustomPCIDevice(device_ids=["a"]), CustomPCIDevice(device_ids=["b"])]
    params = encode_pci_devices(devices, "hostpci")
    assert CustomPCIDevice.parse(params["hostpci1"]).device_ids == ["b"]
    assert len(params) == 2