"""
Relation definitions between types held by a :class:`~blazemarshal.manager.Manager`.

Relations name their types rather than holding them, so a relation can be
declared before the foreign type is built. Types are resolved through the
manager each time the relation is followed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Protocol, Type

from ..errors import RelationError
from .record import read_field

if TYPE_CHECKING:
    from ..manager import Manager
    from ..persistence.generic_type import GenericType


class Relation(Protocol):
    def get_for_entity(self, entity: Any) -> Any: ...


class AbstractRelation(ABC):
    """
    Base class for relations from a native type to a foreign type.

    ``native_field`` and ``foreign_field`` default to the identity field of
    their type when left as ``None``.
    """

    relation_type = ""

    def __init__(
        self,
        manager: "Manager",
        native_type: str,
        foreign_type: str,
        *,
        native_field: Optional[str] = None,
        foreign_field: Optional[str] = None,
    ) -> None:
        self.manager = manager
        self.native_type = native_type
        self.foreign_type = foreign_type
        self._native_field = native_field
        self._foreign_field = foreign_field

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} {self.native_type}.{self.native_field} -> "
            f"{self.foreign_type}.{self.foreign_field}>"
        )

    @property
    def native_field(self) -> str:
        if self._native_field is None:
            return self._identity_field_of(self.native_type)
        return self._native_field

    @property
    def foreign_field(self) -> str:
        if self._foreign_field is None:
            return self._identity_field_of(self.foreign_type)
        return self._foreign_field

    def get_foreign_type(self) -> "GenericType":
        return self.manager.get_type(self.foreign_type)

    def get_native_value(self, entity: Any) -> Any:
        return read_field(entity, self.native_field, None)

    @abstractmethod
    def get_for_entity(self, entity: Any) -> Any:
        """Resolve the related entity or collection for ``entity``."""

    def _identity_field_of(self, type_name: str) -> str:
        identity_field = self.manager.get_type(type_name).get_identity_field()
        if identity_field is None:
            raise RelationError(f"Type '{type_name}' has no identity field to relate on")
        return identity_field


class BelongsTo(AbstractRelation):
    relation_type = "belongs_to"

    def get_for_entity(self, entity: Any) -> Any:
        value = self.get_native_value(entity)
        if value is None:
            return None
        return self.get_foreign_type().get_entity_by_field(self.foreign_field, value)


class HasOne(BelongsTo):
    relation_type = "has_one"


class HasMany(AbstractRelation):
    relation_type = "has_many"

    def get_for_entity(self, entity: Any) -> Any:
        foreign = self.get_foreign_type()
        value = self.get_native_value(entity)
        if value is None:
            return foreign.get_collection([])
        return foreign.get_collection_by_field(self.foreign_field, [value])


class HasManyThrough(AbstractRelation):
    """
    Many-to-many relation resolved through an association type.

    Association entities whose ``through_native_field`` matches the native
    value supply ``through_foreign_field`` values, which are then matched
    against ``foreign_field`` on the foreign type.
    """

    relation_type = "has_many_through"

    def __init__(
        self,
        manager: "Manager",
        native_type: str,
        foreign_type: str,
        *,
        through_type: str,
        through_native_field: str,
        through_foreign_field: str,
        native_field: Optional[str] = None,
        foreign_field: Optional[str] = None,
    ) -> None:
        super().__init__(
            manager,
            native_type,
            foreign_type,
            native_field=native_field,
            foreign_field=foreign_field,
        )
        self.through_type = through_type
        self.through_native_field = through_native_field
        self.through_foreign_field = through_foreign_field

    def get_for_entity(self, entity: Any) -> Any:
        foreign = self.get_foreign_type()
        value = self.get_native_value(entity)
        if value is None:
            return foreign.get_collection([])
        through = self.manager.get_type(self.through_type)
        links = through.get_collection_by_field(self.through_native_field, [value])
        foreign_values = [
            read_field(link, self.through_foreign_field, None) for link in links
        ]
        return foreign.get_collection_by_field(self.foreign_field, foreign_values)


RELATION_TYPES: Dict[str, Type[AbstractRelation]] = {
    cls.relation_type: cls for cls in (BelongsTo, HasOne, HasMany, HasManyThrough)
}

_REQUIRED_KEYS = {
    "belongs_to": ("native_field",),
    "has_one": ("foreign_field",),
    "has_many": ("foreign_field",),
    "has_many_through": ("through_type", "through_native_field", "through_foreign_field"),
}

_ALLOWED_KEYS = {
    "relationship",
    "foreign_type",
    "native_field",
    "foreign_field",
    "through_type",
    "through_native_field",
    "through_foreign_field",
}


class RelationBuilder:
    """
    Builds relation objects from mapping definitions such as::

        {"relationship": "has_many", "foreign_type": "comment", "foreign_field": "post_id"}

    ``foreign_type`` defaults to the relation name.
    """

    def new_instance(
        self,
        manager: "Manager",
        type_name: str,
        relation_name: str,
        info: Mapping[str, Any],
    ) -> AbstractRelation:
        options = dict(info)
        unknown = sorted(set(options) - _ALLOWED_KEYS)
        if unknown:
            raise RelationError(
                f"Unknown keys for relation '{type_name}.{relation_name}': {', '.join(unknown)}"
            )

        relationship = options.pop("relationship", None)
        relation_class = RELATION_TYPES.get(relationship)
        if relation_class is None:
            raise RelationError(
                f"Relation '{type_name}.{relation_name}' has unknown relationship {relationship!r}"
            )

        missing = [key for key in _REQUIRED_KEYS[relationship] if not options.get(key)]
        if missing:
            raise RelationError(
                f"Relation '{type_name}.{relation_name}' requires: {', '.join(missing)}"
            )

        if relation_class is not HasManyThrough:
            through_keys = sorted(key for key in options if key.startswith("through_"))
            if through_keys:
                raise RelationError(
                    f"Relation '{type_name}.{relation_name}' does not accept: {', '.join(through_keys)}"
                )

        foreign_type = options.pop("foreign_type", None) or relation_name
        return relation_class(manager, type_name, foreign_type, **options)
