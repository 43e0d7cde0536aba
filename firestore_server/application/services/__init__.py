"""Application services: structured encoding/decoding and the schema registry."""

from firestore_server.application.services.firestore_decoder import (
    FirestoreDecoder,
    KeyedDecodingContainer,
    UnkeyedDecodingContainer,
)
from firestore_server.application.services.firestore_encoder import FirestoreEncoder
from firestore_server.application.services.schema_registry import (
    CollectionSchema,
    SchemaRegistry,
    TypedCollection,
    TypedDocument,
)

__all__ = [
    "CollectionSchema",
    "FirestoreDecoder",
    "FirestoreEncoder",
    "KeyedDecodingContainer",
    "SchemaRegistry",
    "TypedCollection",
    "TypedDocument",
    "UnkeyedDecodingContainer",
]
