"""
Record normalization and loosely-typed field access.

Records arrive from a data source as mappings or plain attribute objects.
They are normalized into ordered ``dict`` copies so that fields can be read
the same way before and after an entity is built from them.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Tuple

MISSING = object()
_RAISE = object()

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def to_record(data: Any) -> Dict[str, Any]:
    """
    Return an ordered ``dict`` copy of ``data``.

    Mappings are copied key by key. Entities contribute their ``fields()``;
    any other object contributes its public instance attributes.
    """
    if isinstance(data, Mapping):
        return dict(data)
    fields = getattr(data, "fields", None)
    if callable(fields):
        return dict(fields())
    try:
        attributes = vars(data)
    except TypeError as exc:
        raise TypeError(f"Cannot use {type(data).__name__!r} as a record") from exc
    return {name: value for name, value in attributes.items() if not name.startswith("_")}


def read_field(source: Any, name: str, default: Any = _RAISE) -> Any:
    """
    Read field ``name`` from a record or an entity.

    Mappings are read by key, everything else by attribute. A generic entity
    is read by key first, so a field named like one of its methods
    (``fields``, ``to_dict``) still yields the field value. When the field is
    absent ``default`` is returned, or ``KeyError`` raised if none was given.
    """
    from .entity import GenericEntity

    if isinstance(source, (Mapping, GenericEntity)) and name in source:
        return source[name]
    if not isinstance(source, Mapping):
        try:
            return getattr(source, name)
        except AttributeError:
            pass
    if default is _RAISE:
        raise KeyError(name)
    return default


def iter_fields(source: Any) -> Iterator[Tuple[str, Any]]:
    """
    Iterate ``(field, value)`` pairs for the current fields of a record or entity.
    """
    if isinstance(source, Mapping):
        return iter(source.items())
    return iter(to_record(source).items())


def is_numeric(value: Any) -> bool:
    """
    Numbers and numeric strings count as numeric; booleans do not.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value))
    return False


def _as_number(value: Any) -> int | float:
    if isinstance(value, (int, float)):
        return value
    if _INTEGER_RE.match(value):
        return int(value)
    return float(value)


def loosely_equal(old: Any, new: Any) -> bool:
    """
    Compare two numeric values by magnitude, so ``"5" == 5`` and ``"1e1" == 10``.
    """
    return _as_number(old) == _as_number(new)


def strictly_equal(old: Any, new: Any) -> bool:
    return type(old) is type(new) and old == new
