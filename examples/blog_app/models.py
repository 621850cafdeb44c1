"""
Entity classes and type definitions for the blazemarshal blog example.
"""

from __future__ import annotations

from blazemarshal import GenericEntity, GenericEntityBuilder, TypeDefinition


class Author(GenericEntity):
    def display_name(self) -> str:
        return f"{self.name} <{self.email}>"


class Category(GenericEntity):
    pass


class Post(GenericEntity):
    def summary(self, length: int = 40) -> str:
        if len(self.body) <= length:
            return self.body
        return self.body[: length - 3] + "..."


TYPES = {
    "author": TypeDefinition("id", entity_builder=GenericEntityBuilder(Author)),
    "category": TypeDefinition("id", index_fields=["name"], entity_builder=GenericEntityBuilder(Category)),
    "post": TypeDefinition(
        "id",
        index_fields=["author_id", "category_id", "published"],
        entity_builder=GenericEntityBuilder(Post),
        materialize_on_load=False,
    ),
}

RELATIONS = {
    "post": {
        "author": {"relationship": "belongs_to", "native_field": "author_id"},
        "category": {"relationship": "belongs_to", "native_field": "category_id"},
    },
    "author": {
        "posts": {"relationship": "has_many", "foreign_type": "post", "foreign_field": "author_id"},
    },
    "category": {
        "posts": {"relationship": "has_many", "foreign_type": "post", "foreign_field": "category_id"},
    },
}
