import pytest

from blazemarshal.errors import UnknownIdentity
from blazemarshal.persistence import FieldIndexes, IdentityMap, UnitOfWork


def test_identity_map_keeps_one_offset_per_identity():
    identity_map = IdentityMap()
    identity_map.add("a", 0)
    identity_map.add("b", 1)

    assert identity_map.get("a") == 0
    assert identity_map.get("missing") is None
    assert identity_map.values() == ["a", "b"]
    assert identity_map.items() == [("a", 0), ("b", 1)]
    assert "b" in identity_map
    assert len(identity_map) == 2

    with pytest.raises(ValueError):
        identity_map.add("a", 5)


def test_identity_map_require_raises_unknown_identity():
    identity_map = IdentityMap()
    with pytest.raises(UnknownIdentity) as excinfo:
        identity_map.require(42)
    assert excinfo.value.identity_value == 42
    assert isinstance(excinfo.value, KeyError)


def test_field_indexes_keep_load_order_per_value():
    indexes = FieldIndexes(["status"])
    indexes.add("status", "b", 0)
    indexes.add("status", "a", 1)
    indexes.add("status", "b", 2)

    assert "status" in indexes
    assert "other" not in indexes
    assert indexes.first("status", "b") == 0
    assert indexes.offsets("status", "b") == [0, 2]
    assert indexes.first("status", "z") is None
    assert indexes.offsets("status", "z") == []


def test_configuring_field_indexes_discards_previous_entries():
    indexes = FieldIndexes(["status"])
    indexes.add("status", "a", 0)
    indexes.configure(["status", "kind"])

    assert indexes.fields() == ["status", "kind"]
    assert indexes.offsets("status", "a") == []


def test_unit_of_work_tracks_new_offsets_in_order():
    unit_of_work = UnitOfWork()
    unit_of_work.register_new(3)
    unit_of_work.register_new(1)

    assert unit_of_work.new_offsets() == [3, 1]
    assert unit_of_work.is_new(1)
    assert not unit_of_work.is_new(2)
    assert len(unit_of_work) == 2
