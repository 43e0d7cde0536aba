"""Collection and document references bound to a database.

References are plain values: they build REST resource names and queries
but never perform I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from firestore_server.domain.query.query import Query
from firestore_server.domain.value_objects.paths import (
    CollectionPath,
    DatabasePath,
    DocumentPath,
)
from firestore_server.domain.value_objects.values import ReferenceValue


@dataclass(frozen=True)
class CollectionReference:
    database: DatabasePath
    path: CollectionPath

    @property
    def collection_id(self) -> str:
        return self.path.collection_id

    @property
    def parent(self) -> DocumentReference | None:
        parent_path = self.path.parent
        if parent_path is None:
            return None
        return DocumentReference(self.database, parent_path)

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self.database, self.path.document(document_id))

    @property
    def rest_parent(self) -> str:
        """Parent resource name used by list/create/runQuery requests."""
        parent_path = self.path.parent
        if parent_path is None:
            return self.database.documents_path
        return f"{self.database.documents_path}/{parent_path.raw_value}"

    @property
    def rest_path(self) -> str:
        return f"{self.database.documents_path}/{self.path.raw_value}"

    def query(self, result_type: type | None = None) -> Query:
        """Start a query over this collection."""
        return Query.for_collection(self, result_type)

    def __str__(self) -> str:
        return self.path.raw_value


@dataclass(frozen=True)
class DocumentReference:
    database: DatabasePath
    path: DocumentPath

    @property
    def document_id(self) -> str:
        return self.path.document_id

    @property
    def parent(self) -> CollectionReference:
        return CollectionReference(self.database, self.path.parent)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self.database, self.path.collection(collection_id))

    @property
    def rest_name(self) -> str:
        """Full resource name (projects/.../documents/<path>)."""
        return f"{self.database.documents_path}/{self.path.raw_value}"

    def as_value(self) -> ReferenceValue:
        """This document as a referenceValue (for fields, filters and cursors)."""
        return ReferenceValue(self.rest_name)

    def __str__(self) -> str:
        return self.path.raw_value
