"""Schema descriptions of the data sources and the result of reading one."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ValueType(Enum):
    """Type of a value held by a schema attribute."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAP = "map"
    SET = "set"


@dataclass
class Schema:
    """One attribute of a data source.

    ``elem`` describes the elements of a list, set or map: either another
    ``Schema`` for plain values or a ``Resource`` for nested blocks.
    """

    type: ValueType
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    elem: Union[Schema, Resource, None] = None

    def __post_init__(self) -> None:
        if self.required and (self.optional or self.computed):
            raise ValueError("a required attribute cannot be optional or computed")


@dataclass
class Resource:
    """A set of named attributes, as a data source or as a nested block."""

    schema: Mapping[str, Schema] = field(default_factory=dict)

    def required_keys(self) -> set[str]:
        """Names of the attributes the caller has to supply."""
        return {key for key, item in self.schema.items() if item.required}

    def computed_keys(self) -> set[str]:
        """Names of the attributes filled in by a read."""
        return {key for key, item in self.schema.items() if item.computed}

    def nested(self, key: str) -> Resource:
        """Return the block schema of a nested attribute.

        Raises ``KeyError`` for an unknown attribute and ``ValueError`` when
        the attribute holds plain values rather than blocks.
        """
        elem = self.schema[key].elem
        if not isinstance(elem, Resource):
            raise ValueError(f"attribute {key!r} has no nested block schema")
        return elem


@dataclass
class ReadResult:
    """Identifier and attribute values produced by reading a data source."""

    id: str
    values: dict[str, Any] = field(default_factory=dict)