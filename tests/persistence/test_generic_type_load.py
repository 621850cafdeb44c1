from types import SimpleNamespace

import pytest

from blazemarshal import (
    GenericCollection,
    GenericCollectionBuilder,
    GenericEntity,
    GenericEntityBuilder,
    GenericType,
    MissingIdentityField,
)


class CountingBuilder(GenericEntityBuilder):
    def __init__(self):
        super().__init__()
        self.count = 0

    def new_instance(self, record):
        self.count += 1
        return super().new_instance(record)


def make_type(**kwargs):
    kwargs.setdefault("identity_field", "id")
    return GenericType(**kwargs)


def test_load_entity_builds_entity_from_record():
    posts = make_type()
    post = posts.load_entity({"id": 1, "title": "Hello"})

    assert isinstance(post, GenericEntity)
    assert post.id == 1
    assert post.title == "Hello"
    assert posts.get_identity_values() == [1]


def test_reloading_an_identity_returns_existing_entity_and_discards_data():
    posts = make_type()
    first = posts.load_entity({"id": 1, "title": "Original"})
    second = posts.load_entity({"id": 1, "title": "Replacement"})

    assert second is first
    assert second.title == "Original"
    assert posts.get_identity_values() == [1]
    assert len(posts) == 1


def test_load_without_identity_field_raises_and_keeps_state():
    posts = make_type()
    posts.load_entity({"id": 1})

    with pytest.raises(MissingIdentityField) as excinfo:
        posts.load_entity({"title": "No id"})

    assert excinfo.value.identity_field == "id"
    assert posts.get_identity_values() == [1]
    assert len(posts) == 1


def test_load_requires_configured_identity_field():
    posts = GenericType()
    with pytest.raises(MissingIdentityField):
        posts.load_entity({"id": 1})

    posts.set_identity_field("id")
    assert posts.get_identity_field() == "id"
    assert posts.load_entity({"id": 1}).id == 1


def test_load_collection_preserves_input_order():
    posts = make_type()
    collection = posts.load_collection([{"id": 3}, {"id": 1}, {"id": 2}])

    assert [post.id for post in collection] == [3, 1, 2]
    assert posts.get_identity_values() == [3, 1, 2]


def test_load_collection_aliases_repeated_identities():
    posts = make_type()
    collection = posts.load_collection([{"id": 1, "title": "a"}, {"id": 1, "title": "b"}])

    assert len(collection) == 2
    assert collection[0] is collection[1]
    assert collection[0].title == "a"
    assert len(posts) == 1


def test_load_collection_checks_every_record_before_storing():
    posts = make_type()
    with pytest.raises(MissingIdentityField):
        posts.load_collection([{"id": 1}, {"title": "broken"}])

    assert posts.get_identity_values() == []
    assert len(posts) == 0


def test_load_accepts_attribute_records():
    posts = make_type()
    post = posts.load_entity(SimpleNamespace(id=5, title="Namespace"))

    assert post.title == "Namespace"
    assert posts.get_initial_data(post) == {"id": 5, "title": "Namespace"}


def test_eager_load_materializes_immediately():
    builder = CountingBuilder()
    posts = make_type(entity_builder=builder)
    posts.load_collection([{"id": 1}, {"id": 2}])

    assert builder.count == 2
    posts.get_entity(1)
    assert builder.count == 2


def test_lazy_load_defers_materialization_until_read():
    builder = CountingBuilder()
    posts = make_type(entity_builder=builder, materialize_on_load=False, index_fields=["status"])
    collection = posts.load_collection(
        [{"id": 1, "status": "draft"}, {"id": 2, "status": "published"}]
    )

    assert builder.count == 0
    assert posts.get_collection_by_field("status", ["published"]).refs()[0].offset == 1
    assert builder.count == 0

    first = posts.get_entity(1)
    assert builder.count == 1
    assert posts.get_entity(1) is first
    assert collection[0] is first
    assert builder.count == 1
    assert posts.get_initial_data(first) == {"id": 1, "status": "draft"}

    second = collection[1]
    assert builder.count == 2
    assert posts.get_entity_by_field("status", "published") is second


def test_lazy_load_entity_returns_materialized_entity():
    builder = CountingBuilder()
    posts = make_type(entity_builder=builder, materialize_on_load=False)
    post = posts.load_entity({"id": 9})

    assert builder.count == 1
    assert post is posts.get_entity(9)


def test_snapshot_is_independent_of_caller_record():
    posts = make_type()
    record = {"id": 1, "title": "Before"}
    post = posts.load_entity(record)
    record["title"] = "After"

    assert posts.get_initial_data(post)["title"] == "Before"
    assert posts.get_changed_fields(post) == {}


def test_builders_can_be_replaced_after_construction():
    class TaggedCollection(GenericCollection):
        pass

    posts = make_type()
    builder = CountingBuilder()
    collections = GenericCollectionBuilder(TaggedCollection)
    posts.set_entity_builder(builder)
    posts.set_collection_builder(collections)

    loaded = posts.load_collection([{"id": 1}, {"id": 2}])

    assert posts.get_entity_builder() is builder
    assert posts.get_collection_builder() is collections
    assert builder.count == 2
    assert isinstance(loaded, TaggedCollection)
    assert [post.id for post in loaded] == [1, 2]


@pytest.mark.parametrize("materialize_on_load", [True, False])
def test_unhashable_index_value_leaves_type_untouched(materialize_on_load):
    posts = make_type(index_fields=["tags"], materialize_on_load=materialize_on_load)

    with pytest.raises(TypeError, match="unhashable"):
        posts.load_entity({"id": 1, "tags": ["a"]})

    assert posts.get_identity_values() == []
    assert len(posts) == 0

    post = posts.load_entity({"id": 1, "tags": "a"})
    assert posts.get_entity_by_field("tags", "a") is post


def test_load_collection_rejects_unhashable_index_value_before_storing():
    posts = make_type(index_fields=["tags"])

    with pytest.raises(TypeError, match="unhashable"):
        posts.load_collection([{"id": 1, "tags": "a"}, {"id": 2, "tags": {"b"}}])

    assert posts.get_identity_values() == []
    assert len(posts) == 0
