import pytest

from blazemarshal import (
    BelongsTo,
    HasMany,
    HasManyThrough,
    HasOne,
    Manager,
    RelationError,
)
from blazemarshal.core import AbstractRelation


def make_manager():
    manager = Manager(
        types={
            "author": {"identity_field": "id"},
            "profile": {"identity_field": "id", "index_fields": ["author_id"]},
            "post": {"identity_field": "id", "index_fields": ["author_id"]},
            "tag": {"identity_field": "id"},
            "post_tag": {"identity_field": "id", "index_fields": ["post_id"]},
        },
        relations={
            "post": {
                "author": {"relationship": "belongs_to", "native_field": "author_id"},
                "tags": {
                    "relationship": "has_many_through",
                    "foreign_type": "tag",
                    "through_type": "post_tag",
                    "through_native_field": "post_id",
                    "through_foreign_field": "tag_id",
                },
            },
            "author": {
                "posts": {"relationship": "has_many", "foreign_type": "post", "foreign_field": "author_id"},
                "profile": {"relationship": "has_one", "foreign_field": "author_id"},
            },
        },
    )
    manager["author"].load_collection([{"id": 1, "name": "Ada"}, {"id": 2, "name": "Grace"}])
    manager["profile"].load_collection([{"id": 100, "author_id": 1, "bio": "Maths"}])
    manager["post"].load_collection(
        [
            {"id": 10, "author_id": 1, "title": "Engines"},
            {"id": 11, "author_id": 2, "title": "Compilers"},
            {"id": 12, "author_id": 1, "title": "Notes"},
            {"id": 13, "author_id": None, "title": "Orphan"},
        ]
    )
    manager["tag"].load_collection([{"id": "math"}, {"id": "history"}, {"id": "code"}])
    manager["post_tag"].load_collection(
        [
            {"id": 1, "post_id": 10, "tag_id": "history"},
            {"id": 2, "post_id": 10, "tag_id": "math"},
            {"id": 3, "post_id": 11, "tag_id": "code"},
        ]
    )
    return manager


def test_relation_builder_creates_relation_kinds():
    manager = make_manager()
    assert isinstance(manager["post"].get_relation("author"), BelongsTo)
    assert isinstance(manager["post"].get_relation("tags"), HasManyThrough)
    assert isinstance(manager["author"].get_relation("posts"), HasMany)
    assert isinstance(manager["author"].get_relation("profile"), HasOne)


def test_belongs_to_resolves_foreign_entity():
    manager = make_manager()
    posts = manager["post"]
    post = posts.get_entity(11)

    author = posts.get_related(post, "author")
    assert author is manager["author"].get_entity(2)
    assert manager["post"].get_relation("author").foreign_field == "id"


def test_belongs_to_without_native_value_is_none():
    manager = make_manager()
    posts = manager["post"]
    assert posts.get_related(posts.get_entity(13), "author") is None


def test_has_many_returns_aliased_collection():
    manager = make_manager()
    authors = manager["author"]
    ada = authors.get_entity(1)

    posts = authors.get_related(ada, "posts")
    assert [post.title for post in posts] == ["Engines", "Notes"]
    assert posts[0] is manager["post"].get_entity(10)


def test_has_one_resolves_by_foreign_field():
    manager = make_manager()
    authors = manager["author"]

    assert authors.get_related(authors.get_entity(1), "profile").bio == "Maths"
    assert authors.get_related(authors.get_entity(2), "profile") is None


def test_has_many_through_follows_association_type():
    manager = make_manager()
    posts = manager["post"]

    tags = posts.get_related(posts.get_entity(10), "tags")
    assert [tag.id for tag in tags] == ["history", "math"]
    assert posts.get_related(posts.get_entity(12), "tags").is_empty()


def test_relation_can_be_declared_before_foreign_type_is_loaded():
    manager = Manager(types={"comment": {"identity_field": "id"}, "post": {"identity_field": "id"}})
    manager.set_relation(
        "post", "comments", {"relationship": "has_many", "foreign_type": "comment", "foreign_field": "post_id"}
    )
    posts = manager["post"]
    post = posts.load_entity({"id": 1})
    manager["comment"].load_collection([{"id": 5, "post_id": 1}, {"id": 6, "post_id": 2}])

    assert [comment.id for comment in posts.get_related(post, "comments")] == [5]


@pytest.mark.parametrize(
    "info, message",
    [
        ({"relationship": "belongs_to"}, "requires: native_field"),
        ({"relationship": "has_many"}, "requires: foreign_field"),
        ({"relationship": "has_many_through", "through_type": "x"}, "requires:"),
        ({"relationship": "sideways"}, "unknown relationship"),
        ({}, "unknown relationship"),
        ({"relationship": "has_many", "foreign_field": "a", "colour": "red"}, "Unknown keys"),
        ({"relationship": "has_one", "foreign_field": "a", "through_type": "x"}, "does not accept"),
    ],
)
def test_invalid_relation_definitions_raise(info, message):
    manager = Manager(types={"post": {"identity_field": "id"}})
    with pytest.raises(RelationError, match=message):
        manager.set_relation("post", "broken", info)


def test_abstract_relation_cannot_be_instantiated():
    with pytest.raises(TypeError):
        AbstractRelation(make_manager(), "post", "author")
