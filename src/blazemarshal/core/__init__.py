"""
Core building blocks: records, entities, collections and relations.
"""

from .collection import CollectionBuilder, GenericCollection, GenericCollectionBuilder
from .entity import EntityBuilder, GenericEntity, GenericEntityBuilder
from .record import is_numeric, iter_fields, read_field, to_record
from .relations import (
    AbstractRelation,
    BelongsTo,
    HasMany,
    HasManyThrough,
    HasOne,
    Relation,
    RelationBuilder,
)

__all__ = [
    "AbstractRelation",
    "BelongsTo",
    "CollectionBuilder",
    "EntityBuilder",
    "GenericCollection",
    "GenericCollectionBuilder",
    "GenericEntity",
    "GenericEntityBuilder",
    "HasMany",
    "HasManyThrough",
    "HasOne",
    "Relation",
    "RelationBuilder",
    "is_numeric",
    "iter_fields",
    "read_field",
    "to_record",
]
