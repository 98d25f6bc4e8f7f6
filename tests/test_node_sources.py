from datetime import datetime, timedelta, timezone

import pytest

from pvekit.node_sources import (
    dns_schema,
    hosts_schema,
    parse_hosts_file,
    read_dns,
    read_hosts,
    read_time,
    time_schema,
)
from pvekit.schema import ValueType


def _types(resource):
    return {key: item.type for key, item in resource.schema.items()}


def test_dns_schema():
    s = dns_schema()
    assert s.required_keys() == {"node_name"}
    assert s.computed_keys() == {"domain", "servers"}
    assert _types(s) == {
        "domain": ValueType.STRING,
        "node_name": ValueType.STRING,
        "servers": ValueType.LIST,
    }


def test_hosts_schema():
    s = hosts_schema()
    assert s.required_keys() == {"node_name"}
    assert s.computed_keys() == {"addresses", "digest", "entries", "hostnames"}
    assert _types(s) == {
        "addresses": ValueType.LIST,
        "digest": ValueType.STRING,
        "entries": ValueType.LIST,
        "hostnames": ValueType.LIST,
        "node_name": ValueType.STRING,
    }
    entries = s.nested("entries")
    assert entries.computed_keys() == {"address", "hostnames"}
    assert _types(entries) == {
        "address": ValueType.STRING,
        "hostnames": ValueType.LIST,
    }


def test_time_schema():
    s = time_schema()
    assert s.required_keys() == {"node_name"}
    assert s.computed_keys() == {"local_time", "time_zone", "utc_time"}
    assert _types(s) == {
        "local_time": ValueType.STRING,
        "node_name": ValueType.STRING,
        "time_zone": ValueType.STRING,
        "utc_time": ValueType.STRING,
    }


def test_read_dns_full():
    result = read_dns(
        "pve",
        {
            "search_domain": "example.com",
            "server1": "192.0.2.1",
            "server2": None,
            "server3": "192.0.2.3",
        },
    )
    assert result.id == "pve_dns"
    assert result.values == {
        "domain": "example.com",
        "servers": ["192.0.2.1", "192.0.2.3"],
    }


def test_read_dns_empty():
    assert read_dns("n1", {}).values == {"domain": "", "servers": []}


HOSTS = (
    "127.0.0.1 localhost.localdomain localhost\n"
    "# a comment\n"
    "\n"
    "192.0.2.10\tpve1.example.com  pve1\n"
    " 192.0.2.11 indented\n"
    "192.0.2.12\n"
)


def test_parse_hosts_file():
    assert parse_hosts_file(HOSTS) == [
        {"address": "127.0.0.1", "hostnames": ["localhost.localdomain", "localhost"]},
        {"address": "192.0.2.10", "hostnames": ["pve1.example.com", "pve1"]},
        {"address": "192.0.2.12", "hostnames": []},
    ]


def test_read_hosts():
    result = read_hosts("pve", HOSTS, "abc123")
    assert result.id == "pve_hosts"
    assert result.values["addresses"] == ["127.0.0.1", "192.0.2.10", "192.0.2.12"]
    assert result.values["digest"] == "abc123"
    assert result.values["hostnames"] == [
        ["localhost.localdomain", "localhost"],
        ["pve1.example.com", "pve1"],
        [],
    ]
    assert len(result.values["entries"]) == 3


def test_read_hosts_without_digest():
    assert read_hosts("pve", "", None).values == {
        "addresses": [],
        "digest": "",
        "entries": [],
        "hostnames": [],
    }


def test_read_time_utc():
    local = datetime(2020, 1, 1, tzinfo=timezone.utc)
    utc = datetime(2020, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    result = read_time("pve", local, utc, "UTC")
    assert result.id == "pve_time"
    assert result.values["time_zone"] == "UTC"
    assert result.values["utc_time"] == "2020-01-01T12:00:00Z"
    shown = result.values["local_time"]
    assert shown.endswith("Z")
    parsed = datetime.strptime(shown, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)
    assert abs(parsed - datetime.now(timezone.utc)) < timedelta(seconds=10)


def test_read_time_offset_and_timestamp():
    utc = datetime(2021, 6, 1, 8, 30, 15, tzinfo=timezone(timedelta(hours=2)))
    result = read_time("pve", 0, utc, "UTC")
    assert result.values["utc_time"] == "2021-06-01T08:30:15+02:00"
    assert read_time("pve", 0, 0, "").values["utc_time"] == "1970-01-01T00:00:00Z"


def test_read_time_unknown_zone():
    with pytest.raises(ValueError):
        read_time("pve", 0, 0, "Not/AZone")