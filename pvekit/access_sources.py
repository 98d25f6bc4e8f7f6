"""Data sources for cluster aliases, groups and pools.

The read functions take the API objects as mappings with these keys:

* alias: ``cidr``, ``comment``
* group: ``comment``, ``members``
* ACL entry: ``type``, ``user_or_group_id``, ``path``, ``propagate``, ``role_id``
* pool: ``comment``, ``members``
* pool member: ``id``, ``node``, ``datastore_id``, ``type``, ``vm_id``
* list entries of groups and pools: ``id`` (and ``comment`` for groups)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pvekit.schema import ReadResult, Resource, Schema, ValueType


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


def _computed(value_type: ValueType, description: str, elem: Any = None) -> Schema:
    return Schema(value_type, description, computed=True, elem=elem)


def _required_string(description: str) -> Schema:
    return Schema(ValueType.STRING, description, required=True)


def cluster_alias_schema() -> Resource:
    """Schema of the cluster alias data source."""
    return Resource(
        {
            "name": _required_string("Alias name"),
            "cidr": _computed(ValueType.STRING, "IP/CIDR block"),
            "comment": _computed(ValueType.STRING, "Alias comment"),
        }
    )


def read_cluster_alias(name: str, alias: Mapping[str, Any]) -> ReadResult:
    """Build the state of the cluster alias data source."""
    return ReadResult(
        name,
        {
            "cidr": _or(alias.get("cidr"), ""),
            "comment": _or(alias.get("comment"), ""),
        },
    )


def cluster_aliases_schema() -> Resource:
    """Schema of the cluster aliases data source."""
    return Resource(
        {
            "alias_ids": _computed(
                ValueType.LIST, "Alias IDs", Schema(ValueType.STRING)
            ),
        }
    )


def read_cluster_aliases(pools: Iterable[Mapping[str, Any]]) -> ReadResult:
    """Build the state of the cluster aliases data source from a listing."""
    return ReadResult("aliases", {"alias_ids": [entry["id"] for entry in pools]})


def _acl_block() -> Resource:
    return Resource(
        {
            "path": _computed(ValueType.STRING, "The path"),
            "propagate": _computed(
                ValueType.BOOL, "Whether to propagate to child paths"
            ),
            "role_id": _computed(ValueType.STRING, "The role id"),
        }
    )


def group_schema() -> Resource:
    """Schema of the group data source."""
    return Resource(
        {
            "acl": _computed(ValueType.SET, "The access control list", _acl_block()),
            "comment": _computed(ValueType.STRING, "The group comment"),
            "group_id": _required_string("The group id"),
            "members": _computed(
                ValueType.SET, "The group members", Schema(ValueType.STRING)
            ),
        }
    )


def read_group(
    group_id: str,
    group: Mapping[str, Any],
    acl: Iterable[Mapping[str, Any]],
) -> ReadResult:
    """Build the state of the group data source.

    Only the ACL entries that name this group are kept.
    """
    entries = [
        {
            "path": entry.get("path"),
            "propagate": bool(_or(entry.get("propagate"), False)),
            "role_id": entry.get("role_id"),
        }
        for entry in acl
        if entry.get("type") == "group" and entry.get("user_or_group_id") == group_id
    ]
    return ReadResult(
        group_id,
        {
            "acl": entries,
            "comment": _or(group.get("comment"), ""),
            "members": list(_or(group.get("members"), [])),
        },
    )


def groups_schema() -> Resource:
    """Schema of the groups data source."""
    return Resource(
        {
            "comments": _computed(
                ValueType.LIST, "The group comments", Schema(ValueType.STRING)
            ),
            "group_ids": _computed(
                ValueType.LIST, "The group ids", Schema(ValueType.STRING)
            ),
        }
    )


def read_groups(groups: Iterable[Mapping[str, Any]]) -> ReadResult:
    """Build the state of the groups data source from a listing."""
    listing = list(groups)
    return ReadResult(
        "groups",
        {
            "comments": [_or(entry.get("comment"), "") for entry in listing],
            "group_ids": [entry["id"] for entry in listing],
        },
    )


def pool_schema() -> Resource:
    """Schema of the pool data source."""
    members = Resource(
        {
            "datastore_id": _computed(ValueType.STRING, "The datastore id"),
            "id": _computed(ValueType.STRING, "The member id"),
            "node_name": _computed(ValueType.STRING, "The node name"),
            "type": _computed(ValueType.STRING, "The member type"),
            "vm_id": _computed(ValueType.INT, "The virtual machine id"),
        }
    )
    return Resource(
        {
            "comment": _computed(ValueType.STRING, "The pool comment"),
            "members": _computed(ValueType.LIST, "The pool members", members),
            "pool_id": _required_string("The pool id"),
        }
    )


def read_pool(pool_id: str, pool: Mapping[str, Any]) -> ReadResult:
    """Build the state of the pool data source."""
    members = [
        {
            "id": member.get("id"),
            "node_name": member.get("node"),
            "datastore_id": _or(member.get("datastore_id"), ""),
            "type": member.get("type"),
            "vm_id": _or(member.get("vm_id"), 0),
        }
        for member in _or(pool.get("members"), [])
    ]
    return ReadResult(
        pool_id,
        {
            "comment": _or(pool.get("comment"), ""),
            "members": members,
        },
    )


def pools_schema() -> Resource:
    """Schema of the pools data source."""
    return Resource(
        {
            "pool_ids": _computed(
                ValueType.LIST, "The pool ids", Schema(ValueType.STRING)
            ),
        }
    )


def read_pools(pools: Iterable[Mapping[str, Any]]) -> ReadResult:
    """Build the state of the pools data source from a listing."""
    return ReadResult("pools", {"pool_ids": [entry["id"] for entry in pools]})