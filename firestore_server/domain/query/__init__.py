"""Structured-query builder: filters, ordering, cursors and projections."""

from firestore_server.domain.query.filters import (
    CompositeFilter,
    FieldFilter,
    QueryFilter,
    UnaryFilter,
)
from firestore_server.domain.query.query import Query
from firestore_server.domain.query.types import (
    CollectionSelector,
    FieldReference,
    QueryCursor,
    QueryOrder,
    QueryProjection,
)

__all__ = [
    "Query",
    "QueryFilter",
    "FieldFilter",
    "UnaryFilter",
    "CompositeFilter",
    "FieldReference",
    "QueryOrder",
    "QueryCursor",
    "QueryProjection",
    "CollectionSelector",
]
