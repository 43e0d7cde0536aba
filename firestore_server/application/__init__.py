"""Application layer: encoder, decoder and schema registry.

Depends only on the domain layer. Infrastructure builds on these services
to shape REST requests and responses.
"""

from firestore_server.application.services import (
    CollectionSchema,
    FirestoreDecoder,
    FirestoreEncoder,
    SchemaRegistry,
    TypedCollection,
    TypedDocument,
)

__all__ = [
    "CollectionSchema",
    "FirestoreDecoder",
    "FirestoreEncoder",
    "SchemaRegistry",
    "TypedCollection",
    "TypedDocument",
]
