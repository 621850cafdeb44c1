"""
Entity builder protocol and the generic attribute-bag entity.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, Type

from .record import to_record


class EntityBuilder(Protocol):
    def new_instance(self, record: Mapping[str, Any]) -> Any: ...


class GenericEntity:
    """
    Entity whose fields are whatever the record carried.

    Fields are read and written as attributes (``entity.title``) or by key
    (``entity["title"]``). A field that shares its name with a method, such
    as ``fields``, is only reachable by key. Entities compare and hash by
    identity, since the identity map hands out exactly one instance per
    identity value.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        object.__setattr__(self, "_field_values", {})
        values: Dict[str, Any] = to_record(data) if data is not None else {}
        values.update(kwargs)
        for name, value in values.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        field_parts = ", ".join(f"{name}={value!r}" for name, value in self._field_values.items())
        return f"<{self.__class__.__name__} {field_parts}>"

    # Attribute access ----------------------------------------------------
    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._field_values[name]
        except KeyError:
            raise AttributeError(
                f"'{self.__class__.__name__}' entity has no field '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self._field_values[name] = value

    def __delattr__(self, name: str) -> None:
        if name in self._field_values:
            del self._field_values[name]
            return
        object.__delattr__(self, name)

    # Mapping-style access ------------------------------------------------
    def __getitem__(self, name: str) -> Any:
        return self._field_values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._field_values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._field_values

    def __iter__(self) -> Iterator[str]:
        return iter(self._field_values)

    def fields(self) -> Dict[str, Any]:
        return dict(self._field_values)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._field_values)


class GenericEntityBuilder:
    """
    Builds entities of ``entity_class`` from raw records.
    """

    def __init__(self, entity_class: Type[Any] = GenericEntity) -> None:
        self.entity_class = entity_class

    def new_instance(self, record: Mapping[str, Any]) -> Any:
        return self.entity_class(record)
