"""
Append-only slot arena backing a type's identity map.

Every index and collection refers to slots by offset and dereferences through
the store on read. Materializing a slot therefore becomes visible through
every view that holds its offset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

Materializer = Callable[[int, Mapping[str, Any]], Any]
MaterializedCallback = Callable[[int, Any], None]


class Slot:
    __slots__ = ("value", "materialized")

    def __init__(self, value: Any, materialized: bool) -> None:
        self.value = value
        self.materialized = materialized


@dataclass(frozen=True)
class SlotRef:
    """
    Live reference to one slot of a :class:`SlotStore`.
    """

    store: "SlotStore"
    offset: int

    def get(self) -> Any:
        """
        Return the entity in the slot, materializing it if needed.
        """
        return self.store.get(self.offset)

    @property
    def materialized(self) -> bool:
        return self.store.is_materialized(self.offset)


class SlotStore:
    """
    Ordered slots holding either a raw record or a materialized entity.

    ``materializer`` is called with ``(offset, record)`` the first time a raw
    slot is read and must return the entity that replaces the record.
    ``on_materialized`` is then called with ``(offset, entity)`` once the
    entity is in place, so it may read the store again.
    """

    def __init__(
        self,
        materializer: Materializer,
        on_materialized: Optional[MaterializedCallback] = None,
    ) -> None:
        self._slots: List[Slot] = []
        self._materializer = materializer
        self._on_materialized = on_materialized

    def __len__(self) -> int:
        return len(self._slots)

    def append_record(self, record: Mapping[str, Any]) -> int:
        self._slots.append(Slot(record, materialized=False))
        return len(self._slots) - 1

    def append_entity(self, entity: Any) -> int:
        self._slots.append(Slot(entity, materialized=True))
        return len(self._slots) - 1

    def get(self, offset: int) -> Any:
        """
        Return the entity at ``offset``.

        This is a side-effecting read: a raw slot is converted exactly once and
        the entity replaces the record in place.
        """
        slot = self._slot(offset)
        if not slot.materialized:
            slot.value = self._materializer(offset, slot.value)
            slot.materialized = True
            if self._on_materialized is not None:
                self._on_materialized(offset, slot.value)
        return slot.value

    def peek(self, offset: int) -> Any:
        """
        Return the slot content as is, raw record or entity.
        """
        return self._slot(offset).value

    def is_materialized(self, offset: int) -> bool:
        return self._slot(offset).materialized

    def ref(self, offset: int) -> SlotRef:
        self._slot(offset)
        return SlotRef(self, offset)

    def offsets(self) -> range:
        return range(len(self._slots))

    def _slot(self, offset: int) -> Slot:
        if offset < 0 or offset >= len(self._slots):
            raise IndexError(f"Slot offset {offset} out of range")
        return self._slots[offset]
