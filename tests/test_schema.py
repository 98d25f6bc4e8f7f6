import pytest

from pvekit.schema import ReadResult, Resource, Schema, ValueType


def _sample() -> tuple[Resource, Resource]:
    inner = Resource(
        {
            "address": Schema(ValueType.STRING, "The address", computed=True),
        }
    )
    outer = Resource(
        {
            "name": Schema(ValueType.STRING, "The name", required=True),
            "entries": Schema(ValueType.LIST, "Entries", computed=True, elem=inner),
            "tags": Schema(
                ValueType.LIST,
                "Tags",
                optional=True,
                computed=True,
                elem=Schema(ValueType.STRING),
            ),
        }
    )
    return outer, inner


def test_required_keys():
    outer, _ = _sample()
    assert outer.required_keys() == {"name"}


def test_computed_keys():
    outer, _ = _sample()
    assert outer.computed_keys() == {"entries", "tags"}


def test_required_and_computed_are_disjoint():
    outer, _ = _sample()
    assert outer.required_keys().isdisjoint(outer.computed_keys())


def test_nested_returns_block_schema():
    outer, inner = _sample()
    nested = outer.nested("entries")
    assert nested is inner
    assert nested.computed_keys() == {"address"}


def test_nested_on_plain_values_raises():
    outer, _ = _sample()
    with pytest.raises(ValueError):
        outer.nested("tags")


def test_nested_on_unknown_key_raises():
    outer, _ = _sample()
    with pytest.raises(KeyError):
        outer.nested("missing")


def test_required_cannot_be_computed():
    with pytest.raises(ValueError):
        Schema(ValueType.STRING, required=True, computed=True)


def test_required_cannot_be_optional():
    with pytest.raises(ValueError):
        Schema(ValueType.STRING, required=True, optional=True)


def test_empty_resource_has_no_keys():
    resource = Resource()
    assert resource.required_keys() == set()
    assert resource.computed_keys() == set()


def test_read_results_do_not_share_values():
    first = ReadResult("first")
    second = ReadResult("second")
    first.values["x"] = 1
    assert second.values == {}
    assert first.values == {"x": 1}