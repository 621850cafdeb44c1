"""
Collection builder protocol and the generic collection.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Iterator, List, Protocol, Type

from .record import read_field

if TYPE_CHECKING:
    from ..persistence.slots import SlotRef


class CollectionBuilder(Protocol):
    def new_instance(self, refs: List["SlotRef"]) -> Any: ...


class GenericCollection(Sequence):
    """
    Ordered, read-only view over identity map slots.

    The collection holds slot references, never values. Every element read
    goes through the slot store and materializes the slot on first access, so
    two collections sharing a slot always see the same entity.
    """

    def __init__(self, refs: List["SlotRef"]) -> None:
        self._refs = list(refs)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} offsets={[ref.offset for ref in self._refs]}>"

    def __len__(self) -> int:
        return len(self._refs)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self.__class__(self._refs[index])
        return self._refs[index].get()

    def __iter__(self) -> Iterator[Any]:
        for ref in self._refs:
            yield ref.get()

    def refs(self) -> List["SlotRef"]:
        return list(self._refs)

    def is_empty(self) -> bool:
        return not self._refs

    def get_field_values(self, field: str) -> List[Any]:
        """
        Return the value of ``field`` for every entity, ``None`` where absent.
        """
        return [read_field(entity, field, None) for entity in self]


class GenericCollectionBuilder:
    def __init__(self, collection_class: Type[Any] = GenericCollection) -> None:
        self.collection_class = collection_class

    def new_instance(self, refs: List["SlotRef"]) -> Any:
        return self.collection_class(refs)
