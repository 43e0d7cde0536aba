"""Resource path value objects (database, collection and document paths).

Paths alternate collection and document segments:
    users                -> collection
    users/alice          -> document
    users/alice/posts    -> collection (subcollection)

Value objects are immutable and validate themselves on construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from firestore_server.core.constants import DEFAULT_DATABASE_ID
from firestore_server.domain.exceptions import (
    EmptyPathException,
    InvalidCollectionPathException,
    InvalidDocumentPathException,
)


@dataclass(frozen=True)
class DatabasePath:
    """Project + database pair that prefixes every resource name."""

    project_id: str
    database_id: str = DEFAULT_DATABASE_ID

    def __post_init__(self) -> None:
        if not self.project_id:
            raise ValueError("Project ID must be a non-empty string")
        if not self.database_id:
            raise ValueError("Database ID must be a non-empty string")
        if "/" in self.project_id or "/" in self.database_id:
            raise ValueError("Project and database IDs must not contain '/'")

    @property
    def documents_path(self) -> str:
        """Root under which all document resource names live."""
        return f"projects/{self.project_id}/databases/{self.database_id}/documents"

    def __str__(self) -> str:
        return self.documents_path


class SegmentKind(str, Enum):
    COLLECTION = "collection"
    DOCUMENT = "document"


@dataclass(frozen=True)
class PathSegment:
    kind: SegmentKind
    id: str

    @property
    def is_collection(self) -> bool:
        return self.kind is SegmentKind.COLLECTION

    @property
    def is_document(self) -> bool:
        return self.kind is SegmentKind.DOCUMENT


def _split(path: str) -> tuple[PathSegment, ...]:
    parts = [p for p in path.split("/") if p]
    if not parts:
        raise EmptyPathException()
    return tuple(
        PathSegment(SegmentKind.COLLECTION if i % 2 == 0 else SegmentKind.DOCUMENT, part)
        for i, part in enumerate(parts)
    )


def _join(segments: tuple[PathSegment, ...]) -> str:
    return "/".join(s.id for s in segments)


@dataclass(frozen=True)
class ResourcePath:
    """Either a collection or a document path, decided by segment count."""

    segments: tuple[PathSegment, ...]

    @classmethod
    def parse(cls, path: str) -> ResourcePath:
        """Split a slash-separated path; empty segments are ignored.

        Raises:
            EmptyPathException: If the path has no segments.
        """
        return cls(_split(path))

    @property
    def is_collection(self) -> bool:
        return len(self.segments) % 2 == 1

    @property
    def is_document(self) -> bool:
        return bool(self.segments) and len(self.segments) % 2 == 0

    def as_collection(self) -> CollectionPath | None:
        return CollectionPath(self.segments) if self.is_collection else None

    def as_document(self) -> DocumentPath | None:
        return DocumentPath(self.segments) if self.is_document else None

    @property
    def raw_value(self) -> str:
        return _join(self.segments)

    def __str__(self) -> str:
        return self.raw_value


@dataclass(frozen=True)
class CollectionPath:
    """Path with an odd number of segments, ending at a collection."""

    segments: tuple[PathSegment, ...]

    def __post_init__(self) -> None:
        if len(self.segments) % 2 != 1:
            raise InvalidCollectionPathException(_join(self.segments))

    @classmethod
    def parse(cls, path: str) -> CollectionPath:
        """Parse a collection path (e.g. 'users' or 'users/alice/posts').

        Raises:
            EmptyPathException: If the path has no segments.
            InvalidCollectionPathException: If the path names a document.
        """
        segments = _split(path)
        if len(segments) % 2 != 1:
            raise InvalidCollectionPathException(path)
        return cls(segments)

    @property
    def collection_id(self) -> str:
        return self.segments[-1].id

    @property
    def parent(self) -> DocumentPath | None:
        """Owning document for a subcollection; None for a root collection."""
        if len(self.segments) == 1:
            return None
        return DocumentPath(self.segments[:-1])

    def document(self, document_id: str) -> DocumentPath:
        if not document_id or "/" in document_id:
            raise InvalidDocumentPathException(f"{self.raw_value}/{document_id}")
        return DocumentPath(
            (*self.segments, PathSegment(SegmentKind.DOCUMENT, document_id))
        )

    @property
    def raw_value(self) -> str:
        return _join(self.segments)

    def __str__(self) -> str:
        return self.raw_value


@dataclass(frozen=True)
class DocumentPath:
    """Path with an even number (>= 2) of segments, ending at a document."""

    segments: tuple[PathSegment, ...]

    def __post_init__(self) -> None:
        if len(self.segments) < 2 or len(self.segments) % 2 != 0:
            raise InvalidDocumentPathException(_join(self.segments))

    @classmethod
    def parse(cls, path: str) -> DocumentPath:
        """Parse a document path (e.g. 'users/alice').

        Raises:
            EmptyPathException: If the path has no segments.
            InvalidDocumentPathException: If the path names a collection.
        """
        segments = _split(path)
        if len(segments) % 2 != 0:
            raise InvalidDocumentPathException(path)
        return cls(segments)

    @property
    def document_id(self) -> str:
        return self.segments[-1].id

    @property
    def parent(self) -> CollectionPath:
        return CollectionPath(self.segments[:-1])

    def collection(self, collection_id: str) -> CollectionPath:
        if not collection_id or "/" in collection_id:
            raise InvalidCollectionPathException(f"{self.raw_value}/{collection_id}")
        return CollectionPath(
            (*self.segments, PathSegment(SegmentKind.COLLECTION, collection_id))
        )

    @property
    def raw_value(self) -> str:
        return _join(self.segments)

    def __str__(self) -> str:
        return self.raw_value
