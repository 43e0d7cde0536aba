"""Tests for the Document entity and Eventarc document events."""

from datetime import UTC, datetime

import pytest

from firestore_server.domain.entities import Document, FirestoreDocumentEvent
from firestore_server.domain.exceptions import DocumentParseException, ValueParseException
from firestore_server.domain.value_objects import IntegerValue, MapValue, StringValue

NAME = "projects/p/databases/(default)/documents/users/alice"


def _doc_json(**fields: dict) -> dict:
    return {"name": NAME, "fields": fields}


class TestDocument:
    def test_from_json(self) -> None:
        doc = Document.from_json(
            {
                "name": NAME,
                "fields": {"age": {"integerValue": "30"}},
                "createTime": "2024-01-01T00:00:00.123456789Z",
                "updateTime": "2024-01-02T00:00:00Z",
            }
        )
        assert doc.document_id == "alice"
        assert doc.document_path == "users/alice"
        assert doc.get("age") == IntegerValue(30)
        assert doc.create_time == datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=UTC)
        assert doc.update_time == datetime(2024, 1, 2, tzinfo=UTC)

    def test_missing_fields_is_empty(self) -> None:
        doc = Document.from_json({"name": NAME})
        assert doc.fields == {}
        assert doc.create_time is None

    def test_missing_name(self) -> None:
        with pytest.raises(DocumentParseException, match="name"):
            Document.from_json({"fields": {}})

    def test_not_an_object(self) -> None:
        with pytest.raises(DocumentParseException, match="object"):
            Document.from_json([])

    def test_malformed_field(self) -> None:
        with pytest.raises(ValueParseException):
            Document.from_json(_doc_json(age={"integerValue": "x"}))

    def test_to_json_is_write_body(self) -> None:
        doc = Document(NAME, {"name": StringValue("Alice")})
        assert doc.to_json() == {"fields": {"name": {"stringValue": "Alice"}}}

    def test_fields_must_be_values(self) -> None:
        with pytest.raises(ValueError, match="Firestore value"):
            Document(NAME, {"age": 30})  # type: ignore[dict-item]

    def test_with_and_without_fields(self) -> None:
        doc = Document(NAME, {"a": IntegerValue(1)})
        updated = doc.with_fields({"b": IntegerValue(2)})
        assert set(updated.fields) == {"a", "b"}
        assert set(doc.fields) == {"a"}
        assert updated.without_fields("a").fields == {"b": IntegerValue(2)}

    def test_as_map_and_hash(self) -> None:
        doc = Document(NAME, {"a": IntegerValue(1)})
        assert doc.as_map() == MapValue({"a": IntegerValue(1)})
        assert hash(doc) == hash(Document(NAME, {"a": IntegerValue(1)}))

    def test_name_outside_documents_root(self) -> None:
        assert Document("users/alice").document_path is None


class TestFirestoreDocumentEvent:
    def test_create(self) -> None:
        event = FirestoreDocumentEvent.from_json({"value": _doc_json(a={"integerValue": "1"})})
        assert event.is_create
        assert not event.is_update
        assert event.document.document_id == "alice"
        assert event.changed_fields() == {"a"}

    def test_delete(self) -> None:
        event = FirestoreDocumentEvent.from_json({"oldValue": _doc_json()})
        assert event.is_delete
        assert event.document is event.old_value

    def test_update_with_mask(self) -> None:
        event = FirestoreDocumentEvent.from_json(
            {
                "value": _doc_json(a={"integerValue": "2"}),
                "oldValue": _doc_json(a={"integerValue": "1"}),
                "updateMask": {"fieldPaths": ["a", "address.city"]},
            }
        )
        assert event.is_update
        assert event.update_mask == ("a", "address.city")
        assert event.changed_fields() == {"a", "address"}

    def test_update_without_mask_diffs_fields(self) -> None:
        event = FirestoreDocumentEvent.from_json(
            {
                "value": _doc_json(a={"integerValue": "1"}, b={"stringValue": "new"}),
                "oldValue": _doc_json(a={"integerValue": "1"}, c={"stringValue": "gone"}),
            }
        )
        assert event.update_mask is None
        assert event.changed_fields() == {"b", "c"}

    def test_not_an_object(self) -> None:
        with pytest.raises(DocumentParseException, match="Event payload"):
            FirestoreDocumentEvent.from_json("x")
