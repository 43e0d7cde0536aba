"""Firestore value/document codec and structured-query builder."""

from firestore_server.application.services import (
    FirestoreDecoder,
    FirestoreEncoder,
    SchemaRegistry,
)
from firestore_server.domain.entities import Document, FirestoreDocumentEvent
from firestore_server.domain.enums import SortDirection
from firestore_server.domain.query import (
    CompositeFilter,
    FieldFilter,
    FieldReference,
    Query,
    UnaryFilter,
)
from firestore_server.domain.value_objects import (
    ArrayValue,
    BooleanValue,
    BytesValue,
    CollectionReference,
    DatabasePath,
    DocumentReference,
    DoubleValue,
    FirestoreValue,
    GeoPointValue,
    IntegerValue,
    MapValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimestampValue,
    parse_value,
)
from firestore_server.infrastructure.firebase import FirestoreClient

__all__ = [
    "ArrayValue",
    "BooleanValue",
    "BytesValue",
    "CollectionReference",
    "CompositeFilter",
    "DatabasePath",
    "Document",
    "DocumentReference",
    "DoubleValue",
    "FieldFilter",
    "FieldReference",
    "FirestoreClient",
    "FirestoreDecoder",
    "FirestoreDocumentEvent",
    "FirestoreEncoder",
    "FirestoreValue",
    "GeoPointValue",
    "IntegerValue",
    "MapValue",
    "NullValue",
    "Query",
    "ReferenceValue",
    "SchemaRegistry",
    "SortDirection",
    "StringValue",
    "TimestampValue",
    "UnaryFilter",
    "parse_value",
]
