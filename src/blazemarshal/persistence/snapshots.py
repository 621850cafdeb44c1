"""
Load-time snapshots used to detect changed entity fields.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Container, Dict, Mapping, Optional

from ..core.record import is_numeric, iter_fields, loosely_equal, strictly_equal


class SnapshotRegistry:
    """
    Keeps the raw record each loaded entity was built from.

    Snapshots are stored against the entity's slot offset; the entity itself
    is only used to find that offset. The slot store keeps every entity alive,
    so ``id(entity)`` stays unique for the registry's lifetime.
    """

    def __init__(self) -> None:
        self._snapshots: Dict[int, Mapping[str, Any]] = {}
        self._offsets: Dict[int, int] = {}

    def attach(self, offset: int, entity: Any, record: Mapping[str, Any]) -> None:
        if offset in self._snapshots:
            raise ValueError(f"Slot {offset} already has a snapshot")
        self._snapshots[offset] = MappingProxyType(dict(record))
        self._offsets[id(entity)] = offset

    def offset_of(self, entity: Any) -> Optional[int]:
        return self._offsets.get(id(entity))

    def get(self, entity: Any) -> Optional[Mapping[str, Any]]:
        offset = self.offset_of(entity)
        if offset is None:
            return None
        return self._snapshots[offset]


def changed_fields(
    entity: Any,
    snapshot: Optional[Mapping[str, Any]],
    *,
    ignore: Container[str] = (),
) -> Dict[str, Any]:
    """
    Return ``{field: current value}`` for every field that differs from
    ``snapshot``. Without a snapshot every current field counts as changed.

    Numeric values (numbers or numeric strings) compare by magnitude; anything
    else must match in both type and value.
    """
    changed: Dict[str, Any] = {}
    for field, new in iter_fields(entity):
        if field in ignore:
            continue
        if snapshot is None or field not in snapshot:
            changed[field] = new
            continue

        old = snapshot[field]
        if is_numeric(old) and is_numeric(new):
            if not loosely_equal(old, new):
                changed[field] = new
        elif not strictly_equal(old, new):
            changed[field] = new
    return changed
