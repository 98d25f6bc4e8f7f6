# pvekit

`pvekit` reads and writes the settings of QEMU virtual machines on a
virtualization cluster, and turns data fetched from the cluster into the
attribute values of read-only data sources.

## What it covers

- **Property strings** (`pvekit.propstring`). `parse_pairs` splits a
  comma-separated `key=value` string, `flag` renders a boolean as `name=1` or
  `name=0`, and `join_values` joins rendered properties.
- **Device settings.** Dataclasses for the devices of a VM. Each has
  `to_params(key)`, which returns a `dict` of form parameters, and most can
  read a property string with the class method `parse(text)`.
  - `pvekit.devices`: `CustomAgent`, `CustomAudioDevice`, `CustomCPUEmulation`,
    `CustomEFIDisk`, `CustomSharedMemory`, `CustomSMBIOS`, and
    `encode_audio_devices`.
  - `pvekit.misc_devices`: `CustomSpiceEnhancements`, `CustomStartupOrder`,
    `CustomUSBDevice`, `CustomVGADevice`, `CustomWatchdogDevice`,
    `CustomVirtualIODevice`, and `encode_usb_devices`,
    `encode_virtual_io_devices` and `encode_serial_devices`.
  - `pvekit.storage`: `CustomStorageDevice` and `encode_storage_devices`.
  - `pvekit.network`: `CustomNetworkDevice`, `CustomNUMADevice`,
    `CustomPCIDevice`, and `encode_network_devices`, `encode_numa_devices`
    and `encode_pci_devices`.
  - `pvekit.cloudinit`: `CustomCloudInitFiles`, `CustomCloudInitIPConfig`,
    `CustomCloudInitConfig` and `parse_ssh_keys`.

  The list encoders number their keys, such as `net0` and `net1`. The audio,
  network and VirtIO encoders skip devices whose `enabled` is false.
  Malformed numbers in a property string raise `ValueError`.
- **Request bodies** (`pvekit.vm_requests`). `VMCreateRequest` (also
  available as `VMUpdateRequest`), `VMCloneRequest`, `VMMigrateRequest`,
  `VMMoveDiskRequest`, `VMRebootRequest`, `VMResizeDiskRequest` and
  `VMShutdownRequest`. Each gives its form parameters through `to_params()`.
  Unset fields are left out.
- **Responses** (`pvekit.vm_responses`). `VMConfig.from_dict`,
  `VMStatus.from_dict`, `NetworkInterface.from_dict` and
  `parse_network_interfaces` build typed objects from decoded JSON. In a
  `VMConfig`, numbered devices are kept in dictionaries keyed by their API
  name, such as `scsi0`.
- **Data sources.** `pvekit.schema` defines `ValueType`, `Schema`, `Resource`
  (with `required_keys()`, `computed_keys()` and `nested(key)`) and
  `ReadResult`. Each data source has a schema function and a read function:
  - `pvekit.access_sources`: cluster alias(es), group(s) and pool(s).
  - `pvekit.role_sources`: role(s).
  - `pvekit.node_sources`: DNS, hosts (including `parse_hosts_file`) and time.

## Install

```
pip install pvekit
```

## Examples

```python
from pvekit.storage import CustomStorageDevice, encode_storage_devices

disk = CustomStorageDevice.parse("nfs:2041/vm-2041-disk-0.raw,discard=ignore,ssd=1,size=8G")
print(disk.format)   # "raw"
print(disk.size)     # "8G"

params = encode_storage_devices({"scsi0": disk})
# {"scsi0": "file=nfs:2041/vm-2041-disk-0.raw,size=8G,ssd=1,discard=ignore"}
```

```python
from pvekit.node_sources import parse_hosts_file

entries = parse_hosts_file("127.0.0.1 localhost\n# comment\n10.0.0.1\tnode1 node1.lan\n")
# [{"address": "127.0.0.1", "hostnames": ["localhost"]},
#  {"address": "10.0.0.1", "hostnames": ["node1", "node1.lan"]}]
```

```python
from pvekit.access_sources import pool_schema

schema = pool_schema()
print(schema.required_keys())   # {"pool_id"}
```

## What it does not do

`pvekit` does not talk to a cluster. It has no HTTP client, no
authentication and no command-line tool. The read functions take data you
have already fetched, as mappings or plain values, and return a `ReadResult`.
They do not store any state.

## Running the tests

```
pip install -e .[test]
pytest
```