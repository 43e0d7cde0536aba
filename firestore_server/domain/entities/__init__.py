"""Domain entities: documents and document change events."""

from firestore_server.domain.entities.document import Document
from firestore_server.domain.entities.document_event import FirestoreDocumentEvent

__all__ = [
    "Document",
    "FirestoreDocumentEvent",
]
