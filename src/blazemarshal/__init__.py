"""
blazemarshal public package initialization.

An in-process identity map for data-mapper layers: one canonical entity per
identity value, lazy conversion of raw records, secondary indexes, change
tracking and collections that alias shared storage slots.
"""

from .config import TypeDefinition  # noqa: F401
from .core import (
    BelongsTo,
    GenericCollection,
    GenericCollectionBuilder,
    GenericEntity,
    GenericEntityBuilder,
    HasMany,
    HasManyThrough,
    HasOne,
    RelationBuilder,
)  # noqa: F401
from .errors import (
    ConfigurationError,
    DuplicateRelation,
    DuplicateType,
    MarshalError,
    MissingIdentityField,
    RelationError,
    UnknownIdentity,
    UnknownRelation,
    UnknownType,
)  # noqa: F401
from .hooks import hooks  # noqa: F401
from .manager import Manager  # noqa: F401
from .persistence import GenericType  # noqa: F401

__all__ = [
    "BelongsTo",
    "ConfigurationError",
    "DuplicateRelation",
    "DuplicateType",
    "GenericCollection",
    "GenericCollectionBuilder",
    "GenericEntity",
    "GenericEntityBuilder",
    "GenericType",
    "HasMany",
    "HasManyThrough",
    "HasOne",
    "Manager",
    "MarshalError",
    "MissingIdentityField",
    "RelationBuilder",
    "RelationError",
    "TypeDefinition",
    "UnknownIdentity",
    "UnknownRelation",
    "UnknownType",
    "hooks",
]
