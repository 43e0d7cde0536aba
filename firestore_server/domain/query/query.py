"""Immutable, chainable structured-query builder.

Every builder method returns a new Query with one part replaced; the
receiver is never modified. build_structured_query() renders the REST
StructuredQuery JSON.

Example:
    q = (
        Query("users")
        .where_field("age", ">=", 18)
        .where_field("status", "==", "active")
        .order_by("age", SortDirection.DESCENDING)
        .limit(10)
    )
    q.build_structured_query()
    # {"from": [{"collectionId": "users", "allDescendants": False}],
    #  "where": {"compositeFilter": {"op": "AND", "filters": [...]}},
    #  "orderBy": [{"field": {"fieldPath": "age"}, "direction": "DESCENDING"}],
    #  "limit": 10}
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from firestore_server.domain.enums import CompositeFilterOperator, SortDirection
from firestore_server.domain.query.filters import (
    CompositeFilter,
    FieldFilter,
    QueryFilter,
    coerce_literal,
    combine_and,
)
from firestore_server.domain.query.types import (
    CollectionSelector,
    FieldReference,
    QueryCursor,
    QueryOrder,
    QueryProjection,
)

_UNSET: Any = object()

# where_field keyword -> FieldFilter constructor
_FIELD_CONDITIONS = {
    "is_equal_to": "is_equal_to",
    "is_not_equal_to": "is_not_equal_to",
    "is_less_than": "is_less_than",
    "is_less_than_or_equal_to": "is_less_than_or_equal",
    "is_greater_than": "is_greater_than",
    "is_greater_than_or_equal_to": "is_greater_than_or_equal",
    "array_contains": "array_contains",
    "array_contains_any": "array_contains_any",
    "is_in": "is_in",
    "is_not_in": "is_not_in",
}


@dataclass(frozen=True)
class Query:
    """Query over one collection (or collection group).

    Attributes:
        collection_id: Collection the query was created for.
        parent: REST parent resource name used when running the query.
        result_type: Optional type results decode into (not part of equality).
    """

    collection_id: str
    parent: str | None = None
    collection_selectors: tuple[CollectionSelector, ...] = ()
    filter: QueryFilter | None = None
    order_by_clauses: tuple[QueryOrder, ...] = ()
    start_at_cursor: QueryCursor | None = None
    end_at_cursor: QueryCursor | None = None
    limit_count: int | None = None
    offset_count: int | None = None
    projection: QueryProjection | None = None
    result_type: type | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.collection_selectors:
            object.__setattr__(
                self,
                "collection_selectors",
                (CollectionSelector(self.collection_id),),
            )
        else:
            object.__setattr__(
                self, "collection_selectors", tuple(self.collection_selectors)
            )

    @classmethod
    def for_collection(cls, reference: Any, result_type: type | None = None) -> Query:
        """Query over a CollectionReference, with parent bound for runQuery."""
        return cls(
            reference.collection_id,
            parent=reference.rest_parent,
            result_type=result_type,
        )

    # -- filters -----------------------------------------------------------

    def where(self, filter: QueryFilter) -> Query:
        """Add a filter; an existing filter is combined with it under AND."""
        return replace(self, filter=combine_and(self.filter, filter))

    def where_field(
        self,
        field_path: str | FieldReference,
        op: str | None = None,
        value: Any = _UNSET,
        **condition: Any,
    ) -> Query:
        """Add a field comparison.

        Either positional, where_field("age", ">=", 18), or with exactly
        one condition keyword, where_field("age", is_greater_than_or_equal_to=18).
        Keywords: is_equal_to, is_not_equal_to, is_less_than,
        is_less_than_or_equal_to, is_greater_than, is_greater_than_or_equal_to,
        array_contains, array_contains_any, is_in, is_not_in.
        """
        if op is not None:
            if value is _UNSET:
                raise TypeError(f"where_field() with operator {op!r} requires a value")
            if condition:
                raise TypeError("where_field() takes an operator or a condition keyword, not both")
            return self.where(FieldFilter.create(field_path, op, value))
        if value is not _UNSET or len(condition) != 1:
            raise TypeError(
                "where_field() requires an operator and value, or exactly one condition keyword"
            )
        ((name, operand),) = condition.items()
        constructor = _FIELD_CONDITIONS.get(name)
        if constructor is None:
            raise TypeError(f"where_field() got an unexpected keyword argument {name!r}")
        return self.where(getattr(FieldFilter, constructor)(field_path, operand))

    def where_and(self, *filters: QueryFilter) -> Query:
        return self.where(CompositeFilter(CompositeFilterOperator.AND, filters))

    def where_or(self, *filters: QueryFilter) -> Query:
        return self.where(CompositeFilter(CompositeFilterOperator.OR, filters))

    # -- ordering ----------------------------------------------------------

    def order_by(
        self,
        field_path: str | FieldReference,
        direction: SortDirection | str = SortDirection.ASCENDING,
    ) -> Query:
        """Append an order clause; earlier clauses take precedence."""
        if not isinstance(direction, SortDirection):
            direction = SortDirection(direction.upper())
        order = QueryOrder(FieldReference.of(field_path), direction)
        return replace(self, order_by_clauses=(*self.order_by_clauses, order))

    def order_ascending(self, field_path: str | FieldReference) -> Query:
        return self.order_by(field_path, SortDirection.ASCENDING)

    def order_descending(self, field_path: str | FieldReference) -> Query:
        return self.order_by(field_path, SortDirection.DESCENDING)

    # -- pagination ----------------------------------------------------------

    def limit(self, count: int) -> Query:
        if count < 0:
            raise ValueError(f"limit must be non-negative, got {count}")
        return replace(self, limit_count=count)

    def offset(self, count: int) -> Query:
        if count < 0:
            raise ValueError(f"offset must be non-negative, got {count}")
        return replace(self, offset_count=count)

    def start_at(self, *values: Any) -> Query:
        """Start at the given order-by values (values included)."""
        return replace(self, start_at_cursor=_cursor(values, before=False))

    def start_after(self, *values: Any) -> Query:
        """Start after the given order-by values (values excluded)."""
        return replace(self, start_at_cursor=_cursor(values, before=True))

    def end_at(self, *values: Any) -> Query:
        """End at the given order-by values (values included)."""
        return replace(self, end_at_cursor=_cursor(values, before=False))

    def end_before(self, *values: Any) -> Query:
        """End before the given order-by values (values excluded)."""
        return replace(self, end_at_cursor=_cursor(values, before=True))

    # -- projection / scope --------------------------------------------------

    def select(self, *field_paths: str | FieldReference) -> Query:
        return replace(self, projection=QueryProjection.of(*field_paths))

    def collection_group(self) -> Query:
        """Widen the query to every collection with this ID, at any depth."""
        return replace(
            self,
            collection_selectors=(
                CollectionSelector(self.collection_id, all_descendants=True),
            ),
        )

    @property
    def is_collection_group(self) -> bool:
        return any(s.all_descendants for s in self.collection_selectors)

    # -- serialization -------------------------------------------------------

    def build_structured_query(self) -> dict[str, Any]:
        """Render the REST StructuredQuery; only 'from' is always present."""
        query: dict[str, Any] = {
            "from": [s.to_json() for s in self.collection_selectors],
        }
        if self.filter is not None:
            query["where"] = self.filter.to_json()
        if self.projection is not None:
            query["select"] = self.projection.to_json()
        if self.order_by_clauses:
            query["orderBy"] = [o.to_json() for o in self.order_by_clauses]
        if self.start_at_cursor is not None:
            query["startAt"] = self.start_at_cursor.to_json()
        if self.end_at_cursor is not None:
            query["endAt"] = self.end_at_cursor.to_json()
        if self.offset_count is not None:
            query["offset"] = self.offset_count
        if self.limit_count is not None:
            query["limit"] = self.limit_count
        return query


def _cursor(values: tuple[Any, ...], before: bool) -> QueryCursor:
    return QueryCursor(tuple(coerce_literal(v) for v in values), before=before)
