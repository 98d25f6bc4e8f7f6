"""QEMU cloud-init settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import quote, unquote_plus

from pvekit.propstring import join_values, parse_pairs

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_FILE_KEYS = (
    ("meta", "meta_volume"),
    ("network", "network_volume"),
    ("user", "user_volume"),
    ("vendor", "vendor_volume"),
)

_IP_KEYS = (
    ("gw", "gateway_ipv4"),
    ("gw6", "gateway_ipv6"),
    ("ip", "ipv4"),
    ("ip6", "ipv6"),
)


def _render(obj: object, keys: tuple[tuple[str, str], ...]) -> list[str]:
    return [
        f"{name}={getattr(obj, attr)}"
        for name, attr in keys
        if getattr(obj, attr) is not None
    ]


def _fill(obj: object, text: str, keys: tuple[tuple[str, str], ...]) -> None:
    attrs = dict(keys)
    for parts in parse_pairs(text):
        if len(parts) == 2 and parts[0] in attrs:
            setattr(obj, attrs[parts[0]], parts[1])


@dataclass
class CustomCloudInitFiles:
    """Custom cloud-init snippet volumes."""

    meta_volume: str | None = None
    network_volume: str | None = None
    user_volume: str | None = None
    vendor_volume: str | None = None

    @classmethod
    def parse(cls, text: str) -> CustomCloudInitFiles:
        files = cls()
        _fill(files, text, _FILE_KEYS)
        return files


@dataclass
class CustomCloudInitIPConfig:
    """Cloud-init IP configuration of one interface."""

    gateway_ipv4: str | None = None
    gateway_ipv6: str | None = None
    ipv4: str | None = None
    ipv6: str | None = None

    @classmethod
    def parse(cls, text: str) -> CustomCloudInitIPConfig:
        config = cls()
        _fill(config, text, _IP_KEYS)
        return config


@dataclass
class CustomCloudInitConfig:
    """Cloud-init parameters of a virtual machine."""

    files: CustomCloudInitFiles | None = None
    ip_config: list[CustomCloudInitIPConfig] = field(default_factory=list)
    nameserver: str | None = None
    password: str | None = None
    search_domain: str | None = None
    ssh_keys: list[str] | None = None
    type: str | None = None
    username: str | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.files is not None:
            volumes = _render(self.files, _FILE_KEYS)
            if volumes:
                params["cicustom"] = join_values(volumes)
        for index, config in enumerate(self.ip_config):
            values = _render(config, _IP_KEYS)
            if values:
                params[f"ipconfig{index}"] = join_values(values)
        for name, value in (
            ("nameserver", self.nameserver),
            ("cipassword", self.password),
            ("searchdomain", self.search_domain),
        ):
            if value is not None:
                params[name] = value
        if self.ssh_keys is not None:
            params["sshkeys"] = quote("\n".join(self.ssh_keys), safe="")
        if self.type is not None:
            params["citype"] = self.type
        if self.username is not None:
            params["ciuser"] = self.username
        return params


def parse_ssh_keys(text: str) -> list[str]:
    """Decode the URL-escaped, newline separated SSH key list."""
    if _BAD_ESCAPE.search(text):
        raise ValueError(f"invalid URL escape in {text!r}")
    decoded = unquote_plus(text)
    if decoded == "":
        return []
    return decoded.strip().split("\n")