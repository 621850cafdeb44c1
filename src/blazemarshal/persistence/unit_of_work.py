"""
Unit of work tracking entities created in memory rather than loaded.
"""

from __future__ import annotations

from typing import List, Set


class UnitOfWork:
    """
    Remembers the slot offsets of new entities in creation order.

    New entities carry no identity and appear in no index; this register is
    the only way back to them apart from iterating every slot.
    """

    def __init__(self) -> None:
        self._new: List[int] = []
        self._new_offsets: Set[int] = set()

    def register_new(self, offset: int) -> None:
        self._new.append(offset)
        self._new_offsets.add(offset)

    def new_offsets(self) -> List[int]:
        return list(self._new)

    def is_new(self, offset: int) -> bool:
        return offset in self._new_offsets

    def __len__(self) -> int:
        return len(self._new)
