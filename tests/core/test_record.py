from types import SimpleNamespace

import pytest

from blazemarshal.core import GenericEntity, is_numeric, iter_fields, read_field, to_record
from blazemarshal.core.record import MISSING, loosely_equal, strictly_equal


def test_to_record_copies_mappings_and_objects():
    source = {"id": 1, "title": "x"}
    record = to_record(source)
    assert record == source
    assert record is not source

    obj = SimpleNamespace(id=2, _private="hidden")
    assert to_record(obj) == {"id": 2}


def test_to_record_rejects_values_without_fields():
    with pytest.raises(TypeError):
        to_record(42)


def test_read_field_handles_mappings_and_attributes():
    assert read_field({"a": 1}, "a") == 1
    assert read_field(SimpleNamespace(a=2), "a") == 2
    assert read_field({"a": 1}, "b", None) is None
    assert read_field({"a": 1}, "b", MISSING) is MISSING
    with pytest.raises(KeyError):
        read_field(SimpleNamespace(), "b")


def test_iter_fields_uses_entity_fields():
    entity = GenericEntity({"id": 1, "name": "x"})
    assert dict(iter_fields(entity)) == {"id": 1, "name": "x"}
    assert dict(iter_fields(SimpleNamespace(id=3))) == {"id": 3}


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, True),
        (5.5, True),
        ("5", True),
        (" -1.5e3 ", True),
        (".5", True),
        ("5a", False),
        ("", False),
        ("0x1A", False),
        (True, False),
        (None, False),
        ([5], False),
    ],
)
def test_is_numeric(value, expected):
    assert is_numeric(value) is expected


def test_loose_and_strict_equality():
    assert loosely_equal("5", 5)
    assert loosely_equal("1e1", 10)
    assert not loosely_equal("5", "6")
    assert strictly_equal("a", "a")
    assert not strictly_equal(1, True)
    assert not strictly_equal(None, "")


def test_to_record_reads_entity_fields():
    entity = GenericEntity({"id": 4, "title": "x"})
    assert to_record(entity) == {"id": 4, "title": "x"}


def test_read_field_prefers_entity_fields_over_methods():
    entity = GenericEntity({"fields": "title,body", "to_dict": 1})

    assert read_field(entity, "fields") == "title,body"
    assert read_field(entity, "to_dict") == 1
    assert read_field(entity, "missing", None) is None
