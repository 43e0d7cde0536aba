"""Tests for query filter expressions and the operator enums."""

import pytest

from firestore_server.domain.enums import (
    CompositeFilterOperator,
    FieldFilterOperator,
    UnaryFilterOperator,
)
from firestore_server.domain.exceptions import UnsupportedTypeException
from firestore_server.domain.query import (
    CompositeFilter,
    FieldFilter,
    FieldReference,
    UnaryFilter,
)
from firestore_server.domain.query.filters import combine_and
from firestore_server.domain.value_objects import (
    ArrayValue,
    IntegerValue,
    NullValue,
    StringValue,
)


class TestFieldFilterOperator:
    @pytest.mark.parametrize(
        ("symbol", "op"),
        [
            ("==", FieldFilterOperator.EQUAL),
            ("!=", FieldFilterOperator.NOT_EQUAL),
            ("<", FieldFilterOperator.LESS_THAN),
            ("<=", FieldFilterOperator.LESS_THAN_OR_EQUAL),
            (">", FieldFilterOperator.GREATER_THAN),
            (">=", FieldFilterOperator.GREATER_THAN_OR_EQUAL),
            ("array-contains", FieldFilterOperator.ARRAY_CONTAINS),
            ("array-contains-any", FieldFilterOperator.ARRAY_CONTAINS_ANY),
            ("in", FieldFilterOperator.IN),
            ("not-in", FieldFilterOperator.NOT_IN),
            ("LESS_THAN", FieldFilterOperator.LESS_THAN),
            ("equal", FieldFilterOperator.EQUAL),
        ],
    )
    def test_from_symbol(self, symbol: str, op: FieldFilterOperator) -> None:
        assert FieldFilterOperator.from_symbol(symbol) is op

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValueError, match="Unknown field filter operator"):
            FieldFilterOperator.from_symbol("~=")

    def test_values(self) -> None:
        assert "ARRAY_CONTAINS_ANY" in FieldFilterOperator.values()
        assert len(FieldFilterOperator.values()) == 10


class TestFieldFilter:
    def test_literal_coerced(self) -> None:
        f = FieldFilter.create("age", ">=", 18)
        assert f == FieldFilter(
            FieldReference("age"), FieldFilterOperator.GREATER_THAN_OR_EQUAL, IntegerValue(18)
        )

    def test_list_operators_wrap_values(self) -> None:
        f = FieldFilter.is_in("status", ["a", "b"])
        assert f.value == ArrayValue((StringValue("a"), StringValue("b")))
        assert FieldFilter.is_not_in("n", (1,)).value == ArrayValue((IntegerValue(1),))
        assert FieldFilter.array_contains_any("t", ["x"]).op is FieldFilterOperator.ARRAY_CONTAINS_ANY

    def test_array_contains_takes_single_value(self) -> None:
        assert FieldFilter.array_contains("tags", "x").value == StringValue("x")

    def test_structural_equality(self) -> None:
        assert FieldFilter.is_equal_to("a", 1) == FieldFilter.is_equal_to("a", 1)
        assert hash(FieldFilter.is_equal_to("a", 1)) == hash(FieldFilter.is_equal_to("a", 1))
        assert FieldFilter.is_equal_to("a", 1) != FieldFilter.is_not_equal_to("a", 1)

    def test_to_json(self) -> None:
        assert FieldFilter.is_less_than("score", 5).to_json() == {
            "fieldFilter": {
                "field": {"fieldPath": "score"},
                "op": "LESS_THAN",
                "value": {"integerValue": "5"},
            }
        }

    def test_unencodable_literal(self) -> None:
        with pytest.raises(UnsupportedTypeException):
            FieldFilter.is_equal_to("x", object())

    def test_document_id_field(self) -> None:
        f = FieldFilter.is_equal_to(FieldReference.DOCUMENT_ID, "projects/p/databases/(default)/documents/u/a")
        assert f.to_json()["fieldFilter"]["field"] == {"fieldPath": "__name__"}

    def test_empty_field_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            FieldReference("")


class TestUnaryFilter:
    def test_constructors(self) -> None:
        assert UnaryFilter.is_null("a").op is UnaryFilterOperator.IS_NULL
        assert UnaryFilter.is_not_null("a").op is UnaryFilterOperator.IS_NOT_NULL
        assert UnaryFilter.is_nan("a").op is UnaryFilterOperator.IS_NAN
        assert UnaryFilter.is_not_nan("a").op is UnaryFilterOperator.IS_NOT_NAN

    def test_to_json(self) -> None:
        assert UnaryFilter.is_null("email").to_json() == {
            "unaryFilter": {"op": "IS_NULL", "field": {"fieldPath": "email"}}
        }


class TestCompositeFilter:
    def test_nested_to_json(self) -> None:
        f = CompositeFilter.or_(
            FieldFilter.is_equal_to("status", "active"),
            CompositeFilter.and_(
                FieldFilter.is_greater_than("age", 18),
                UnaryFilter.is_not_null("email"),
            ),
        )
        assert f.to_json() == {
            "compositeFilter": {
                "op": "OR",
                "filters": [
                    {
                        "fieldFilter": {
                            "field": {"fieldPath": "status"},
                            "op": "EQUAL",
                            "value": {"stringValue": "active"},
                        }
                    },
                    {
                        "compositeFilter": {
                            "op": "AND",
                            "filters": [
                                {
                                    "fieldFilter": {
                                        "field": {"fieldPath": "age"},
                                        "op": "GREATER_THAN",
                                        "value": {"integerValue": "18"},
                                    }
                                },
                                {
                                    "unaryFilter": {
                                        "op": "IS_NOT_NULL",
                                        "field": {"fieldPath": "email"},
                                    }
                                },
                            ],
                        }
                    },
                ],
            }
        }

    def test_children_must_be_filters(self) -> None:
        with pytest.raises(ValueError, match="must be filters"):
            CompositeFilter(CompositeFilterOperator.AND, ("age",))  # type: ignore[arg-type]

    @pytest.mark.parametrize("build", [CompositeFilter.and_, CompositeFilter.or_])
    def test_empty_children_rejected(self, build) -> None:
        with pytest.raises(ValueError, match="at least one child filter"):
            build()

    def test_equal_trees(self) -> None:
        def build() -> CompositeFilter:
            return CompositeFilter.and_(
                FieldFilter.is_equal_to("a", None), UnaryFilter.is_nan("b")
            )

        assert build() == build()
        assert build().filters[0].value == NullValue()


class TestCombineAnd:
    def test_first_filter_kept_as_is(self) -> None:
        f = FieldFilter.is_equal_to("a", 1)
        assert combine_and(None, f) is f

    def test_two_filters_become_and(self) -> None:
        a = FieldFilter.is_equal_to("a", 1)
        b = FieldFilter.is_equal_to("b", 2)
        assert combine_and(a, b) == CompositeFilter.and_(a, b)

    def test_existing_and_is_nested(self) -> None:
        a, b, c = (FieldFilter.is_equal_to(n, 1) for n in "abc")
        grouped = CompositeFilter.and_(a, b)
        assert combine_and(grouped, c) == CompositeFilter.and_(grouped, c)
        assert combine_and(grouped, c) != CompositeFilter.and_(a, b, c)

    def test_existing_or_is_wrapped(self) -> None:
        a, b, c = (FieldFilter.is_equal_to(n, 1) for n in "abc")
        either = CompositeFilter.or_(a, b)
        assert combine_and(either, c) == CompositeFilter.and_(either, c)
