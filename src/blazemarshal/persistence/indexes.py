"""
Secondary field indexes: (field, value) to slot offsets in load order.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional


class FieldIndexes:
    """
    Non-unique indexes on a configured set of fields.

    Configuring the field list discards every previous index.
    """

    def __init__(self, fields: Iterable[str] = ()) -> None:
        self._indexes: Dict[str, Dict[Any, List[int]]] = {}
        self.configure(fields)

    def configure(self, fields: Iterable[str]) -> None:
        self._indexes = {field: defaultdict(list) for field in fields}

    def fields(self) -> List[str]:
        return list(self._indexes)

    def __contains__(self, field: object) -> bool:
        return field in self._indexes

    def add(self, field: str, value: Any, offset: int) -> None:
        self._indexes[field][value].append(offset)

    def first(self, field: str, value: Any) -> Optional[int]:
        offsets = self._indexes[field].get(value)
        if not offsets:
            return None
        return offsets[0]

    def offsets(self, field: str, value: Any) -> List[int]:
        return list(self._indexes[field].get(value, ()))
