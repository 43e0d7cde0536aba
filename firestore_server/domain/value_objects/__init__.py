"""Domain value objects: Firestore values, resource paths and references."""

from firestore_server.domain.value_objects.paths import (
    CollectionPath,
    DatabasePath,
    DocumentPath,
    PathSegment,
    ResourcePath,
)
from firestore_server.domain.value_objects.references import (
    CollectionReference,
    DocumentReference,
)
from firestore_server.domain.value_objects.values import (
    ArrayValue,
    BooleanValue,
    BytesValue,
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
    to_python,
)

__all__ = [
    "FirestoreValue",
    "NullValue",
    "BooleanValue",
    "IntegerValue",
    "DoubleValue",
    "StringValue",
    "TimestampValue",
    "BytesValue",
    "ReferenceValue",
    "GeoPointValue",
    "ArrayValue",
    "MapValue",
    "parse_value",
    "to_python",
    "DatabasePath",
    "PathSegment",
    "ResourcePath",
    "CollectionPath",
    "DocumentPath",
    "CollectionReference",
    "DocumentReference",
]
