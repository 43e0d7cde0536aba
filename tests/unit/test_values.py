"""Tests for the Firestore value model and its tagged JSON form."""

import math
from datetime import UTC, datetime

import pytest

from firestore_server.domain.exceptions import ValueParseException
from firestore_server.domain.value_objects.values import (
    ArrayValue,
    BooleanValue,
    BytesValue,
    DoubleValue,
    GeoPointValue,
    IntegerValue,
    MapValue,
    NullValue,
    ReferenceValue,
    StringValue,
    TimestampValue,
    array_of,
    parse_fields,
    parse_value,
    to_python,
)


class TestValueConstruction:
    def test_integer_rejects_bool(self) -> None:
        with pytest.raises(ValueError, match="requires int"):
            IntegerValue(True)

    def test_integer_range(self) -> None:
        IntegerValue(2**63 - 1)
        IntegerValue(-(2**63))
        with pytest.raises(ValueError, match="64-bit"):
            IntegerValue(2**63)

    def test_double_coerces_int(self) -> None:
        value = DoubleValue(3)
        assert isinstance(value.value, float)
        assert value == DoubleValue(3.0)

    def test_timestamp_normalized_to_utc(self) -> None:
        value = TimestampValue(datetime(2024, 1, 1))
        assert value.value.tzinfo == UTC

    def test_geo_point_bounds(self) -> None:
        GeoPointValue(-90, 180)
        with pytest.raises(ValueError, match="Latitude"):
            GeoPointValue(91.0, 0.0)
        with pytest.raises(ValueError, match="Longitude"):
            GeoPointValue(0.0, -181.0)

    def test_array_elements_must_be_values(self) -> None:
        with pytest.raises(ValueError, match="Firestore values"):
            ArrayValue((1, 2))  # type: ignore[arg-type]

    def test_map_values_must_be_values(self) -> None:
        with pytest.raises(ValueError, match="'age'"):
            MapValue({"age": 30})  # type: ignore[dict-item]

    def test_map_equality_ignores_key_order_and_hashes(self) -> None:
        a = MapValue({"x": IntegerValue(1), "y": StringValue("b")})
        b = MapValue({"y": StringValue("b"), "x": IntegerValue(1)})
        assert a == b
        assert hash(a) == hash(b)
        assert len(a) == 2
        assert "x" in a
        assert a.get("missing") is None

    def test_array_helpers(self) -> None:
        arr = array_of([IntegerValue(1), NullValue()])
        assert len(arr) == 2
        assert list(arr) == [IntegerValue(1), NullValue()]

    def test_distinct_cases_not_equal(self) -> None:
        assert IntegerValue(1) != DoubleValue(1.0)
        assert BooleanValue(True) != IntegerValue(1)


class TestToJson:
    def test_scalars(self) -> None:
        assert NullValue().to_json() == {"nullValue": None}
        assert BooleanValue(False).to_json() == {"booleanValue": False}
        assert StringValue("hi").to_json() == {"stringValue": "hi"}
        assert DoubleValue(1.5).to_json() == {"doubleValue": 1.5}
        assert ReferenceValue("projects/p/databases/(default)/documents/a/b").to_json() == {
            "referenceValue": "projects/p/databases/(default)/documents/a/b"
        }

    def test_integer_is_decimal_string(self) -> None:
        assert IntegerValue(42).to_json() == {"integerValue": "42"}

    def test_integer_precision_beyond_2_53(self) -> None:
        big = 2**53 + 1
        encoded = IntegerValue(big).to_json()
        assert encoded == {"integerValue": "9007199254740993"}
        assert parse_value(encoded) == IntegerValue(big)

    def test_non_finite_doubles(self) -> None:
        assert DoubleValue(math.inf).to_json() == {"doubleValue": "Infinity"}
        assert DoubleValue(-math.inf).to_json() == {"doubleValue": "-Infinity"}
        assert DoubleValue(math.nan).to_json() == {"doubleValue": "NaN"}

    def test_timestamp(self) -> None:
        value = TimestampValue(datetime(2024, 1, 2, 3, 4, 5, 6, tzinfo=UTC))
        assert value.to_json() == {"timestampValue": "2024-01-02T03:04:05.000006Z"}

    def test_bytes_base64(self) -> None:
        assert BytesValue(b"\x00\xff").to_json() == {"bytesValue": "AP8="}

    def test_geo_point(self) -> None:
        assert GeoPointValue(1.5, -2.0).to_json() == {
            "geoPointValue": {"latitude": 1.5, "longitude": -2.0}
        }

    def test_nested(self) -> None:
        value = MapValue(
            {"tags": ArrayValue((StringValue("a"), IntegerValue(2))), "n": NullValue()}
        )
        assert value.to_json() == {
            "mapValue": {
                "fields": {
                    "tags": {
                        "arrayValue": {
                            "values": [{"stringValue": "a"}, {"integerValue": "2"}]
                        }
                    },
                    "n": {"nullValue": None},
                }
            }
        }

    def test_empty_array(self) -> None:
        assert ArrayValue().to_json() == {"arrayValue": {"values": []}}


class TestParseValue:
    def test_scalars(self) -> None:
        assert parse_value({"nullValue": None}) == NullValue()
        assert parse_value({"booleanValue": True}) == BooleanValue(True)
        assert parse_value({"integerValue": "-7"}) == IntegerValue(-7)
        assert parse_value({"integerValue": 7}) == IntegerValue(7)
        assert parse_value({"doubleValue": 2}) == DoubleValue(2.0)
        assert parse_value({"stringValue": ""}) == StringValue("")

    def test_non_finite_double(self) -> None:
        assert parse_value({"doubleValue": "Infinity"}) == DoubleValue(math.inf)
        parsed = parse_value({"doubleValue": "NaN"})
        assert isinstance(parsed, DoubleValue)
        assert math.isnan(parsed.value)

    def test_timestamp_with_nanoseconds(self) -> None:
        parsed = parse_value({"timestampValue": "2024-01-02T03:04:05.123456789Z"})
        assert parsed == TimestampValue(datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=UTC))

    def test_bytes_standard_and_urlsafe(self) -> None:
        assert parse_value({"bytesValue": "AP8="}) == BytesValue(b"\x00\xff")
        assert parse_value({"bytesValue": "_-8"}) == BytesValue(b"\xff\xef")

    def test_geo_point_defaults(self) -> None:
        assert parse_value({"geoPointValue": {"latitude": 10}}) == GeoPointValue(10.0, 0.0)

    def test_empty_containers(self) -> None:
        assert parse_value({"arrayValue": {}}) == ArrayValue()
        assert parse_value({"mapValue": {}}) == MapValue()

    def test_unknown_tag_is_null(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING"):
            assert parse_value({"vectorValue": {}}) == NullValue()
        assert "vectorValue" in caplog.text

    def test_empty_object_is_null(self) -> None:
        assert parse_value({}) == NullValue()

    def test_not_an_object(self) -> None:
        with pytest.raises(ValueParseException, match="JSON object"):
            parse_value("x")

    @pytest.mark.parametrize(
        "payload",
        [
            {"booleanValue": "true"},
            {"integerValue": "12.5"},
            {"integerValue": True},
            {"integerValue": str(2**64)},
            {"doubleValue": "fast"},
            {"stringValue": 3},
            {"timestampValue": "not a time"},
            {"bytesValue": "A"},
            {"geoPointValue": {"latitude": 100}},
            {"arrayValue": {"values": "a"}},
            {"mapValue": []},
        ],
    )
    def test_malformed_payloads(self, payload: dict) -> None:
        with pytest.raises(ValueParseException):
            parse_value(payload)

    def test_parse_fields(self) -> None:
        assert parse_fields(None) == {}
        assert parse_fields({"a": {"integerValue": "1"}}) == {"a": IntegerValue(1)}
        with pytest.raises(ValueParseException, match="fields"):
            parse_fields([])

    def test_round_trip(self) -> None:
        value = MapValue(
            {
                "name": StringValue("Alice"),
                "age": IntegerValue(30),
                "score": DoubleValue(9.5),
                "active": BooleanValue(True),
                "at": TimestampValue(datetime(2024, 5, 1, tzinfo=UTC)),
                "raw": BytesValue(b"abc"),
                "where": GeoPointValue(1.0, 2.0),
                "tags": ArrayValue((StringValue("x"), NullValue())),
            }
        )
        assert parse_value(value.to_json()) == value

    @pytest.mark.parametrize(
        ("moment", "text"),
        [
            (datetime(1, 1, 1, tzinfo=UTC), "0001-01-01T00:00:00.000000Z"),
            (datetime(999, 12, 31, tzinfo=UTC), "0999-12-31T00:00:00.000000Z"),
        ],
    )
    def test_early_timestamps_round_trip(self, moment: datetime, text: str) -> None:
        value = TimestampValue(moment)
        assert value.to_json() == {"timestampValue": text}
        assert parse_value(value.to_json()) == value


class TestToPython:
    def test_nested(self) -> None:
        value = MapValue(
            {
                "a": ArrayValue((IntegerValue(1), NullValue())),
                "ref": ReferenceValue("projects/p/databases/(default)/documents/u/1"),
            }
        )
        assert to_python(value) == {
            "a": [1, None],
            "ref": "projects/p/databases/(default)/documents/u/1",
        }

    def test_geo_point_kept(self) -> None:
        point = GeoPointValue(1.0, 2.0)
        assert to_python(point) is point
