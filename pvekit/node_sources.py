"""Data sources for a node's DNS settings, hosts file and clock."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pvekit.schema import ReadResult, Resource, Schema, ValueType


def _computed(value_type: ValueType, description: str, elem: Any = None) -> Schema:
    return Schema(value_type, description, computed=True, elem=elem)


def _node_name() -> Schema:
    return Schema(ValueType.STRING, "The node name", required=True)


def dns_schema() -> Resource:
    """Schema of the DNS data source."""
    return Resource(
        {
            "domain": _computed(ValueType.STRING, "The DNS search domain"),
            "node_name": _node_name(),
            "servers": _computed(
                ValueType.LIST, "The DNS servers", Schema(ValueType.STRING)
            ),
        }
    )


def read_dns(node_name: str, dns: Mapping[str, Any]) -> ReadResult:
    """Build the state of the DNS data source.

    ``dns`` holds ``search_domain`` and ``server1`` to ``server3``, any of
    which may be missing.
    """
    domain = dns.get("search_domain")
    servers = [
        dns[key]
        for key in ("server1", "server2", "server3")
        if dns.get(key) is not None
    ]
    return ReadResult(
        f"{node_name}_dns",
        {"domain": "" if domain is None else domain, "servers": servers},
    )


def hosts_schema() -> Resource:
    """Schema of the hosts data source."""
    entries = Resource(
        {
            "address": _computed(ValueType.STRING, "The address"),
            "hostnames": _computed(
                ValueType.LIST, "The hostnames", Schema(ValueType.STRING)
            ),
        }
    )
    return Resource(
        {
            "addresses": _computed(
                ValueType.LIST, "The addresses", Schema(ValueType.STRING)
            ),
            "digest": _computed(ValueType.STRING, "The SHA1 digest"),
            "entries": _computed(ValueType.LIST, "The host entries", entries),
            "hostnames": _computed(
                ValueType.LIST,
                "The hostnames",
                Schema(ValueType.LIST, elem=Schema(ValueType.STRING)),
            ),
            "node_name": _node_name(),
        }
    )


def parse_hosts_file(text: str) -> list[dict[str, Any]]:
    """Parse a hosts file into entries with an ``address`` and ``hostnames``.

    Comment lines and lines that start with whitespace or are empty are skipped.
    """
    entries = []
    for line in text.split("\n"):
        if line.startswith("#"):
            continue
        values = line.replace("\t", " ").split(" ")
        if values[0] == "":
            continue
        entries.append(
            {"address": values[0], "hostnames": [name for name in values[1:] if name]}
        )
    return entries


def read_hosts(node_name: str, data: str, digest: str | None) -> ReadResult:
    """Build the state of the hosts data source from the hosts file contents."""
    entries = parse_hosts_file(data)
    return ReadResult(
        f"{node_name}_hosts",
        {
            "addresses": [entry["address"] for entry in entries],
            "digest": "" if digest is None else digest,
            "entries": entries,
            "hostnames": [entry["hostnames"] for entry in entries],
        },
    )


def time_schema() -> Resource:
    """Schema of the time data source."""
    return Resource(
        {
            "local_time": _computed(ValueType.STRING, "The local timestamp"),
            "node_name": _node_name(),
            "time_zone": _computed(ValueType.STRING, "The time zone"),
            "utc_time": _computed(ValueType.STRING, "The UTC timestamp"),
        }
    )


def _load_zone(name: str) -> tzinfo:
    if name in ("", "UTC"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise ValueError(f"unknown time zone: {name!r}") from err


def _as_datetime(value: datetime | float) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    return datetime.fromtimestamp(value, timezone.utc)


def _rfc3339(moment: datetime) -> str:
    offset = moment.utcoffset()
    stamp = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if not offset:
        return stamp + "Z"
    minutes = int(offset.total_seconds()) // 60
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}:{mins:02d}"


def read_time(
    node_name: str,
    local_time: datetime | float,
    utc_time: datetime | float,
    time_zone: str,
) -> ReadResult:
    """Build the state of the time data source.

    Times are datetimes (naive ones count as UTC) or Unix timestamps. The
    local time is corrected by its drift from this machine's clock and shown
    in the node's time zone. Raises ``ValueError`` for an unknown zone.
    """
    zone = _load_zone(time_zone)
    local = _as_datetime(local_time)
    offset = local - datetime.now(timezone.utc)
    corrected = (local - offset).astimezone(zone)
    return ReadResult(
        f"{node_name}_time",
        {
            "local_time": _rfc3339(corrected),
            "time_zone": time_zone,
            "utc_time": _rfc3339(_as_datetime(utc_time)),
        },
    )