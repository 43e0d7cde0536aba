"""Schema registry: typed accessors for collections, declared in code.

Firestore has no DDL. Registering each collection ID with the model its
documents decode into keeps collection names and document shapes in one
place:

    registry = SchemaRegistry(DatabasePath("my-project"))
    registry.register("users", User)
    registry.register("posts", Post, parent="users")

    users = registry.collection("users")
    users.query().where_field("age", ">=", 18)        # -> Query
    posts = users.document("alice").subcollection("posts")
    posts.reference.rest_path
    # 'projects/my-project/databases/(default)/documents/users/alice/posts'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from firestore_server.application.services.firestore_decoder import FirestoreDecoder
from firestore_server.application.services.firestore_encoder import FirestoreEncoder
from firestore_server.domain.entities.document import Document
from firestore_server.domain.exceptions import SchemaRegistrationException
from firestore_server.domain.query.query import Query
from firestore_server.domain.value_objects.paths import CollectionPath, DatabasePath
from firestore_server.domain.value_objects.references import (
    CollectionReference,
    DocumentReference,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionSchema(Generic[T]):
    """Registration entry: collection ID, document model and parent collection ID."""

    collection_id: str
    model: type[T]
    parent: str | None = None


class TypedCollection(Generic[T]):
    """Collection accessor that encodes/decodes documents as model T."""

    def __init__(
        self,
        registry: SchemaRegistry,
        schema: CollectionSchema[T],
        reference: CollectionReference,
    ) -> None:
        self._registry = registry
        self.schema = schema
        self.reference = reference

    @property
    def collection_id(self) -> str:
        return self.schema.collection_id

    def document(self, document_id: str) -> TypedDocument[T]:
        return TypedDocument(self._registry, self, self.reference.document(document_id))

    def query(self) -> Query:
        return self.reference.query(self.schema.model)

    def decode(self, document: Document) -> T:
        return self._registry.decoder.decode(self.schema.model, document)

    def encode(self, obj: T, document_id: str) -> Document:
        """Encode obj as the document with the given ID in this collection."""
        name = self.reference.document(document_id).rest_name
        return self._registry.encoder.encode_document(obj, name)


class TypedDocument(Generic[T]):
    """Document accessor within a TypedCollection."""

    def __init__(
        self,
        registry: SchemaRegistry,
        collection: TypedCollection[T],
        reference: DocumentReference,
    ) -> None:
        self._registry = registry
        self.collection = collection
        self.reference = reference

    @property
    def document_id(self) -> str:
        return self.reference.document_id

    def subcollection(self, collection_id: str) -> TypedCollection[Any]:
        """Accessor for a registered subcollection under this document.

        Raises:
            SchemaRegistrationException: If collection_id is not registered
                with this document's collection as parent.
        """
        schema = self._registry.schema(collection_id)
        if schema.parent != self.collection.collection_id:
            raise SchemaRegistrationException(
                f"Collection '{collection_id}' is not registered under "
                f"'{self.collection.collection_id}'",
                collection_id,
            )
        return TypedCollection(
            self._registry, schema, self.reference.collection(collection_id)
        )

    def encode(self, obj: T) -> Document:
        return self.collection.encode(obj, self.document_id)


class SchemaRegistry:
    """Maps collection IDs to document models and builds typed accessors."""

    def __init__(
        self,
        database: DatabasePath,
        *,
        encoder: FirestoreEncoder | None = None,
        decoder: FirestoreDecoder | None = None,
    ) -> None:
        self.database = database
        self.encoder = encoder or FirestoreEncoder()
        self.decoder = decoder or FirestoreDecoder()
        self._schemas: dict[str, CollectionSchema[Any]] = {}

    def register(
        self, collection_id: str, model: type[T], parent: str | None = None
    ) -> CollectionSchema[T]:
        """Register a collection.

        Raises:
            SchemaRegistrationException: If collection_id is already registered
                or parent is not registered.
        """
        if collection_id in self._schemas:
            raise SchemaRegistrationException(
                f"Collection '{collection_id}' is already registered", collection_id
            )
        if parent is not None and parent not in self._schemas:
            raise SchemaRegistrationException(
                f"Parent collection '{parent}' of '{collection_id}' is not registered",
                collection_id,
            )
        schema = CollectionSchema(collection_id, model, parent)
        self._schemas[collection_id] = schema
        logger.debug(
            "Registered collection %s -> %s (parent=%s)",
            collection_id,
            model.__name__,
            parent,
        )
        return schema

    def schema(self, collection_id: str) -> CollectionSchema[Any]:
        try:
            return self._schemas[collection_id]
        except KeyError:
            raise SchemaRegistrationException(
                f"Collection '{collection_id}' is not registered", collection_id
            ) from None

    def __contains__(self, collection_id: object) -> bool:
        return collection_id in self._schemas

    @property
    def collection_ids(self) -> list[str]:
        return list(self._schemas)

    def collection(
        self, collection_id: str, parent_path: str | None = None
    ) -> TypedCollection[Any]:
        """Accessor for a registered collection.

        Subcollections need parent_path, the owning document's path
        (e.g. 'users/alice').
        """
        schema = self.schema(collection_id)
        if schema.parent is not None and parent_path is None:
            raise SchemaRegistrationException(
                f"Collection '{collection_id}' is a subcollection of "
                f"'{schema.parent}'; parent_path is required",
                collection_id,
            )
        raw = f"{parent_path.strip('/')}/{collection_id}" if parent_path else collection_id
        path = CollectionPath.parse(raw)
        if schema.parent is not None and path.parent.parent.collection_id != schema.parent:
            raise SchemaRegistrationException(
                f"Collection '{collection_id}' must live under '{schema.parent}', "
                f"got parent path '{parent_path}'",
                collection_id,
            )
        return TypedCollection(self, schema, CollectionReference(self.database, path))
