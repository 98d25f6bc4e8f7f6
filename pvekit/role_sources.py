"""Data sources for access roles."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pvekit.schema import ReadResult, Resource, Schema, ValueType


def role_schema() -> Resource:
    """Schema of the role data source."""
    return Resource(
        {
            "role_id": Schema(ValueType.STRING, "The role id", required=True),
            "privileges": Schema(
                ValueType.SET,
                "The role privileges",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
        }
    )


def read_role(role_id: str, privileges: Iterable[str] | None) -> ReadResult:
    """Build the state of the role data source from the role's privileges."""
    return ReadResult(role_id, {"privileges": set(privileges or ())})


def roles_schema() -> Resource:
    """Schema of the roles data source."""
    return Resource(
        {
            "privileges": Schema(
                ValueType.LIST,
                "The role privileges",
                computed=True,
                elem=Schema(ValueType.SET, elem=Schema(ValueType.STRING)),
            ),
            "role_ids": Schema(
                ValueType.LIST,
                "The role ids",
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
            "special": Schema(
                ValueType.LIST,
                "Whether the role is special (built-in)",
                computed=True,
                elem=Schema(ValueType.BOOL),
            ),
        }
    )


def read_roles(roles: Iterable[Mapping[str, Any]]) -> ReadResult:
    """Build the state of the roles data source from a listing.

    Each entry is a mapping with ``id`` and optionally ``privileges`` and
    ``special``.
    """
    listing = list(roles)
    return ReadResult(
        "roles",
        {
            "privileges": [set(entry.get("privileges") or ()) for entry in listing],
            "role_ids": [entry["id"] for entry in listing],
            "special": [bool(entry.get("special") or False) for entry in listing],
        },
    )