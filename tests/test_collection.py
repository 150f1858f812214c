from __future__ import annotations

import pytest

from docstore import Collection, Database, Document, DocumentNotFoundError, ReservedKeyError


def test_get_and_set_name():
    collection = Collection("test")
    assert collection.get_name() == "test"
    collection.set_name("newName")
    assert collection.get_name() == "newName"


def test_create_document_with_empty_object():
    collection = Collection("test")
    doc = collection.create_document()
    assert doc.has_property("_id")
    assert doc.has_property("_created")
    assert doc.has_property("_updated")
    assert doc.get_property("_id") == 0


def test_auto_ids_are_sequential_and_never_reissued():
    collection = Collection("test")
    ids = [collection.create_document({"n": i}).id for i in range(5)]
    assert ids == [0, 1, 2, 3, 4]

    assert collection.remove_by_id(4) is True
    assert collection.remove_by_id(2) is True
    assert collection.create_document().id == 5
    assert collection.get_collection_meta().auto_id == 6


def test_users_scenario():
    db = Database()
    users = db.create_collection("users")

    assert users.create_document({"name": "Alice"}).id == 0
    assert users.create_document({"name": "Bob"}).id == 1
    assert users.remove_by_id(0) is True

    with pytest.raises(DocumentNotFoundError):
        users.get_by_id(0)

    remaining = users.get_by_attribute([])
    assert len(remaining) == 1
    assert remaining[0].get_property("name") == "Bob"
    assert remaining[0].id == 1


def test_explicit_ids_are_kept_and_push_the_counter_forward():
    collection = Collection("test")
    assert collection.create_document({"_id": "abc"}).id == "abc"
    assert collection.create_document({"_id": 5}).id == 5
    assert collection.create_document().id == 6
    # zero is a real id, not a missing one
    assert collection.create_document({"_id": 0}).id == 0
    assert collection.create_document().id == 7


def test_rejected_create_does_not_consume_an_id():
    collection = Collection("test")
    with pytest.raises(ReservedKeyError):
        collection.create_document({"_created": "2020-01-01T00:00:00.000Z"})
    assert len(collection) == 0
    assert collection.create_document().id == 0


def test_import_document_keeps_values_and_advances_counter():
    collection = Collection("test")
    record = {"_id": 3, "_created": "2024-01-01T00:00:00.000Z", "_updated": "2024-01-02T00:00:00.000Z", "x": 1}
    doc = collection.import_document(record)
    assert doc.object() == record
    assert collection.create_document().id == 4


def test_add_document_appends_without_uniqueness_check():
    collection = Collection("test")
    first = collection.create_document({"name": "first"})
    duplicate = Document.create({"_id": first.id, "name": "second"})
    collection.add_document(duplicate)

    assert len(collection) == 2
    # lookups return the first match in insertion order
    assert collection.get_by_id(0).get_property("name") == "first"


def test_get_by_id_finds_correct_document_among_many():
    collection = Collection("test")
    for name in ("first", "second", "third"):
        collection.create_document({"name": name})
    doc = collection.get_by_id(1)
    assert doc.get_property("name") == "second"
    assert doc.get_property("_id") == 1


def test_get_by_id_raises_when_not_found():
    collection = Collection("test")
    collection.create_document({"name": "test"})
    with pytest.raises(DocumentNotFoundError) as exc:
        collection.get_by_id(999)
    assert "Error 301" in str(exc.value)


def test_get_by_id_does_not_coerce_types():
    collection = Collection("test")
    collection.create_document({"name": "zero"})
    collection.create_document({"_id": "7", "name": "seven"})

    with pytest.raises(DocumentNotFoundError):
        collection.get_by_id("0")
    with pytest.raises(DocumentNotFoundError):
        collection.get_by_id(False)
    with pytest.raises(DocumentNotFoundError):
        collection.get_by_id(7)
    assert collection.get_by_id(0.0).get_property("name") == "zero"


def test_remove_by_id_returns_false_for_unknown_id():
    collection = Collection("test")
    assert collection.remove_by_id(999) is False


def test_remove_by_id_then_get_raises():
    collection = Collection("test")
    doc = collection.create_document({"name": "test doc"})
    assert collection.get_by_id(doc.id) is doc
    assert collection.remove_by_id(doc.id) is True
    with pytest.raises(DocumentNotFoundError):
        collection.get_by_id(doc.id)


def test_remove_by_id_updates_collection_meta(clock):
    collection = Collection("test")
    doc = collection.create_document({"name": "test doc"})
    before = collection.get_collection_meta().updated
    collection.remove_by_id(doc.id)
    assert collection.get_collection_meta().updated > before


def test_failed_remove_leaves_meta_untouched(clock):
    collection = Collection("test")
    collection.create_document({"name": "test doc"})
    before = collection.get_collection_meta().updated
    assert collection.remove_by_id("missing") is False
    assert collection.remove_by_attribute([{"name": "name", "value": "other"}]) is False
    assert collection.get_collection_meta().updated == before


def test_set_document_property_updates_document_and_collection(clock):
    collection = Collection("test")
    doc = collection.create_document({"name": "old"})
    before = collection.get_collection_meta().updated
    same = collection.set_document_property(doc.id, "name", "new")
    assert same is doc
    assert doc.get_property("name") == "new"
    assert collection.get_collection_meta().updated > before


def test_set_document_property_rejects_id_in_any_state():
    collection = Collection("test")
    doc = collection.create_document()
    with pytest.raises(ReservedKeyError):
        collection.set_document_property(doc.id, "_id", 42)
    with pytest.raises(ReservedKeyError):
        doc.set_property("_id", 42)
    assert doc.id == 0


def test_attached_collection_refreshes_database(clock):
    db = Database()
    collection = db.create_collection("test")
    collection.create_document({"name": "a"})
    assert db.get_db_meta().updated == collection.get_collection_meta().updated


def test_detached_collection_keeps_own_bookkeeping(clock):
    collection = Collection("test")
    created = collection.get_collection_meta().created
    collection.create_document()
    meta = collection.get_collection_meta()
    assert collection.database is None
    assert meta.updated > created
    assert meta.name == "test"
    assert meta.auto_id == 1


def test_iteration_preserves_insertion_order():
    collection = Collection("test")
    for name in ("a", "b", "c"):
        collection.create_document({"name": name})
    assert [doc.get_property("name") for doc in collection] == ["a", "b", "c"]
    assert len(collection) == 3
