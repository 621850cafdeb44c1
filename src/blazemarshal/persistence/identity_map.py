"""
Identity index mapping identity values to slot offsets.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..errors import UnknownIdentity


class IdentityMap:
    """
    Stores one slot offset per identity value, in load order.
    """

    def __init__(self) -> None:
        self._store: Dict[Any, int] = {}

    def add(self, identity_value: Any, offset: int) -> None:
        if identity_value in self._store:
            raise ValueError(f"Identity value {identity_value!r} is already mapped")
        self._store[identity_value] = offset

    def get(self, identity_value: Any) -> Optional[int]:
        return self._store.get(identity_value)

    def require(self, identity_value: Any) -> int:
        try:
            return self._store[identity_value]
        except KeyError:
            raise UnknownIdentity(identity_value) from None

    def values(self) -> List[Any]:
        return list(self._store)

    def items(self) -> List[Tuple[Any, int]]:
        return list(self._store.items())

    def __contains__(self, identity_value: Any) -> bool:
        return identity_value in self._store

    def __len__(self) -> int:
        return len(self._store)
