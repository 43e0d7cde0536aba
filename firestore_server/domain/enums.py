"""Enumerations for the structured-query wire format.

Enum values are the exact strings the Firestore REST API expects.
"""

from enum import Enum


class FieldFilterOperator(str, Enum):
    """Comparison operator of a field filter."""

    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    ARRAY_CONTAINS = "ARRAY_CONTAINS"
    IN = "IN"
    ARRAY_CONTAINS_ANY = "ARRAY_CONTAINS_ANY"
    NOT_IN = "NOT_IN"

    @classmethod
    def values(cls) -> list[str]:
        """Return all operator values as strings."""
        return [op.value for op in cls]

    @classmethod
    def from_symbol(cls, symbol: str) -> "FieldFilterOperator":
        """Resolve a client-style symbol ('==', '<', 'array-contains', ...) or wire name.

        Raises:
            ValueError: If the symbol is not a known operator.
        """
        op = _OP_SYMBOLS.get(symbol)
        if op is not None:
            return op
        try:
            return cls(symbol.upper())
        except ValueError:
            raise ValueError(f"Unknown field filter operator: {symbol!r}") from None


_OP_SYMBOLS: dict[str, FieldFilterOperator] = {
    "==": FieldFilterOperator.EQUAL,
    "!=": FieldFilterOperator.NOT_EQUAL,
    "<": FieldFilterOperator.LESS_THAN,
    "<=": FieldFilterOperator.LESS_THAN_OR_EQUAL,
    ">": FieldFilterOperator.GREATER_THAN,
    ">=": FieldFilterOperator.GREATER_THAN_OR_EQUAL,
    "in": FieldFilterOperator.IN,
    "not-in": FieldFilterOperator.NOT_IN,
    "not_in": FieldFilterOperator.NOT_IN,
    "array_contains": FieldFilterOperator.ARRAY_CONTAINS,
    "array-contains": FieldFilterOperator.ARRAY_CONTAINS,
    "array_contains_any": FieldFilterOperator.ARRAY_CONTAINS_ANY,
    "array-contains-any": FieldFilterOperator.ARRAY_CONTAINS_ANY,
}


class UnaryFilterOperator(str, Enum):
    """Operator of a unary (null / NaN) filter."""

    IS_NAN = "IS_NAN"
    IS_NULL = "IS_NULL"
    IS_NOT_NAN = "IS_NOT_NAN"
    IS_NOT_NULL = "IS_NOT_NULL"


class CompositeFilterOperator(str, Enum):
    """Operator joining the children of a composite filter."""

    AND = "AND"
    OR = "OR"


class SortDirection(str, Enum):
    """Direction of an order-by clause."""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"
