"""Domain layer: value model, documents, paths, query builder and exceptions.

No I/O and no dependencies on infrastructure. Used by the application
(encoder/decoder, schema registry) and infrastructure layers.
"""

from firestore_server.domain.entities import Document, FirestoreDocumentEvent
from firestore_server.domain.enums import (
    CompositeFilterOperator,
    FieldFilterOperator,
    SortDirection,
    UnaryFilterOperator,
)
from firestore_server.domain.exceptions import (
    DecodingException,
    EncodingException,
    FirestoreAPIException,
    FirestoreServerException,
    KeyNotFoundException,
    OutOfBoundsException,
    PathException,
    TopLevelNotObjectException,
    TypeMismatchException,
    UnsupportedTypeException,
    ValueParseException,
)

__all__ = [
    # Entities
    "Document",
    "FirestoreDocumentEvent",
    # Enums
    "CompositeFilterOperator",
    "FieldFilterOperator",
    "SortDirection",
    "UnaryFilterOperator",
    # Exceptions
    "DecodingException",
    "EncodingException",
    "FirestoreAPIException",
    "FirestoreServerException",
    "KeyNotFoundException",
    "OutOfBoundsException",
    "PathException",
    "TopLevelNotObjectException",
    "TypeMismatchException",
    "UnsupportedTypeException",
    "ValueParseException",
]
