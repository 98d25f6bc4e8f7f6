import pytest

from pvekit.propstring import flag, join_values, parse_pairs


def test_parse_pairs_splits_and_trims():
    assert parse_pairs("a=1, b=2") == [["a", "1"], ["b", "2"]]


def test_parse_pairs_keeps_bare_values():
    assert parse_pairs("virtio,type=x") == [["virtio"], ["type", "x"]]


def test_parse_pairs_keeps_extra_equals():
    assert parse_pairs("a=b=c") == [["a", "b", "c"]]


def test_parse_pairs_empty_string():
    assert parse_pairs("") == [[""]]


@pytest.mark.parametrize("value, expected", [(True, "enabled=1"), (False, "enabled=0")])
def test_flag(value, expected):
    assert flag("enabled", value) == expected


def test_join_values_round_trip():
    values = ["size=4", "name=shm"]
    joined = join_values(values)
    assert [ "=".join(p) for p in parse_pairs(joined)] == values


def test_join_values_empty():
    assert join_values([]) == ""