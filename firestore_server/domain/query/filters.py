"""Query filter expressions: field comparisons, unary null/NaN checks and
AND/OR composites.

Filters are frozen dataclasses, so two independently built trees with the
same shape compare and hash equal. Composite children may themselves be
composites (arbitrary nesting).

Example:
    f = CompositeFilter.or_(
        FieldFilter.is_equal_to("status", "active"),
        CompositeFilter.and_(
            FieldFilter.is_greater_than("age", 18),
            UnaryFilter.is_not_null("email"),
        ),
    )
    f.to_json()  # {"compositeFilter": {"op": "OR", "filters": [...]}}
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from firestore_server.domain.enums import (
    CompositeFilterOperator,
    FieldFilterOperator,
    UnaryFilterOperator,
)
from firestore_server.domain.query.types import FieldReference
from firestore_server.domain.value_objects.values import (
    ArrayValue,
    FirestoreValue,
    is_value,
)


def coerce_literal(value: Any) -> FirestoreValue:
    """Return value as a FirestoreValue, encoding plain Python values.

    Raises:
        UnsupportedTypeException: If value has no Firestore representation.
    """
    if is_value(value):
        return value
    from firestore_server.application.services.firestore_encoder import FirestoreEncoder

    return FirestoreEncoder().encode_value(value)


def _array_literal(values: Iterable[Any]) -> ArrayValue:
    if isinstance(values, ArrayValue):
        return values
    return ArrayValue(tuple(coerce_literal(v) for v in values))


@dataclass(frozen=True)
class FieldFilter:
    """Compare a field against a literal value."""

    field: FieldReference
    op: FieldFilterOperator
    value: FirestoreValue

    @classmethod
    def create(
        cls,
        field: str | FieldReference,
        op: FieldFilterOperator | str,
        value: Any,
    ) -> FieldFilter:
        """Build from a field path, an operator (enum, wire name or symbol) and a value.

        List operators (in, not-in, array-contains-any) wrap value in an array.
        """
        if not isinstance(op, FieldFilterOperator):
            op = FieldFilterOperator.from_symbol(op)
        if op in _LIST_OPERATORS:
            literal: FirestoreValue = _array_literal(value)
        else:
            literal = coerce_literal(value)
        return cls(FieldReference.of(field), op, literal)

    @classmethod
    def is_equal_to(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.EQUAL, value)

    @classmethod
    def is_not_equal_to(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.NOT_EQUAL, value)

    @classmethod
    def is_less_than(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.LESS_THAN, value)

    @classmethod
    def is_less_than_or_equal(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.LESS_THAN_OR_EQUAL, value)

    @classmethod
    def is_greater_than(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.GREATER_THAN, value)

    @classmethod
    def is_greater_than_or_equal(
        cls, field: str | FieldReference, value: Any
    ) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.GREATER_THAN_OR_EQUAL, value)

    @classmethod
    def array_contains(cls, field: str | FieldReference, value: Any) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.ARRAY_CONTAINS, value)

    @classmethod
    def is_in(cls, field: str | FieldReference, values: Iterable[Any]) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.IN, values)

    @classmethod
    def array_contains_any(
        cls, field: str | FieldReference, values: Iterable[Any]
    ) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.ARRAY_CONTAINS_ANY, values)

    @classmethod
    def is_not_in(cls, field: str | FieldReference, values: Iterable[Any]) -> FieldFilter:
        return cls.create(field, FieldFilterOperator.NOT_IN, values)

    def to_json(self) -> dict[str, Any]:
        return {
            "fieldFilter": {
                "field": self.field.to_json(),
                "op": self.op.value,
                "value": self.value.to_json(),
            }
        }


_LIST_OPERATORS = frozenset(
    {
        FieldFilterOperator.IN,
        FieldFilterOperator.NOT_IN,
        FieldFilterOperator.ARRAY_CONTAINS_ANY,
    }
)


@dataclass(frozen=True)
class UnaryFilter:
    """Null / NaN check on a single field."""

    field: FieldReference
    op: UnaryFilterOperator

    @classmethod
    def is_null(cls, field: str | FieldReference) -> UnaryFilter:
        return cls(FieldReference.of(field), UnaryFilterOperator.IS_NULL)

    @classmethod
    def is_not_null(cls, field: str | FieldReference) -> UnaryFilter:
        return cls(FieldReference.of(field), UnaryFilterOperator.IS_NOT_NULL)

    @classmethod
    def is_nan(cls, field: str | FieldReference) -> UnaryFilter:
        return cls(FieldReference.of(field), UnaryFilterOperator.IS_NAN)

    @classmethod
    def is_not_nan(cls, field: str | FieldReference) -> UnaryFilter:
        return cls(FieldReference.of(field), UnaryFilterOperator.IS_NOT_NAN)

    def to_json(self) -> dict[str, Any]:
        return {"unaryFilter": {"op": self.op.value, "field": self.field.to_json()}}


@dataclass(frozen=True)
class CompositeFilter:
    """AND / OR over an ordered sequence of child filters."""

    op: CompositeFilterOperator
    filters: tuple[QueryFilter, ...]

    def __post_init__(self) -> None:
        filters = tuple(self.filters)
        if not filters:
            raise ValueError(f"{self.op.value} filter needs at least one child filter")
        for child in filters:
            if not isinstance(child, FILTER_TYPES):
                raise ValueError(
                    f"Composite filter children must be filters, got {type(child).__name__}"
                )
        object.__setattr__(self, "filters", filters)

    @classmethod
    def and_(cls, *filters: QueryFilter) -> CompositeFilter:
        return cls(CompositeFilterOperator.AND, filters)

    @classmethod
    def or_(cls, *filters: QueryFilter) -> CompositeFilter:
        return cls(CompositeFilterOperator.OR, filters)

    def to_json(self) -> dict[str, Any]:
        return {
            "compositeFilter": {
                "op": self.op.value,
                "filters": [f.to_json() for f in self.filters],
            }
        }


QueryFilter = FieldFilter | UnaryFilter | CompositeFilter

FILTER_TYPES: tuple[type, ...] = (FieldFilter, UnaryFilter, CompositeFilter)


def combine_and(existing: QueryFilter | None, new: QueryFilter) -> QueryFilter:
    """Conjoin new onto existing.

    The result is always a two-child AND; an existing AND composite is
    nested, not extended.
    """
    if existing is None:
        return new
    return CompositeFilter(CompositeFilterOperator.AND, (existing, new))
