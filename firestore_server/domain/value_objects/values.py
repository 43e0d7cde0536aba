"""Firestore value model and its REST tagged-field JSON encoding.

Every Firestore value is exactly one of the case classes below. Each case
is an immutable, hashable dataclass that knows how to render itself as the
REST API's tagged JSON ({"stringValue": ...}, {"integerValue": "123"}, ...).
parse_value is the inverse.

Example:
    value = MapValue({"name": StringValue("Alice"), "age": IntegerValue(30)})
    value.to_json()
    # {"mapValue": {"fields": {"name": {"stringValue": "Alice"},
    #                          "age": {"integerValue": "30"}}}}
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from firestore_server.core.constants import INT64_MAX, INT64_MIN
from firestore_server.domain.exceptions import ValueParseException
from firestore_server.shared.utils.datetime import (
    ensure_utc,
    format_timestamp,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

# Non-finite doubles travel as strings in proto3 JSON.
_NON_FINITE_TO_JSON = {"nan": "NaN", "inf": "Infinity", "-inf": "-Infinity"}
_NON_FINITE_FROM_JSON = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}


@dataclass(frozen=True)
class NullValue:
    """Explicit null."""

    type_name: ClassVar[str] = "null"

    def to_json(self) -> dict[str, Any]:
        return {"nullValue": None}


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    type_name: ClassVar[str] = "boolean"

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise ValueError(f"BooleanValue requires bool, got {type(self.value).__name__}")

    def to_json(self) -> dict[str, Any]:
        return {"booleanValue": self.value}


@dataclass(frozen=True)
class IntegerValue:
    """Signed 64-bit integer. Serialized as a decimal string to keep full precision."""

    value: int

    type_name: ClassVar[str] = "integer"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"IntegerValue requires int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"IntegerValue out of 64-bit range: {self.value}")

    def to_json(self) -> dict[str, Any]:
        return {"integerValue": str(self.value)}


@dataclass(frozen=True)
class DoubleValue:
    value: float

    type_name: ClassVar[str] = "double"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"DoubleValue requires float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def to_json(self) -> dict[str, Any]:
        if math.isfinite(self.value):
            return {"doubleValue": self.value}
        return {"doubleValue": _NON_FINITE_TO_JSON[repr(self.value)]}


@dataclass(frozen=True)
class StringValue:
    value: str

    type_name: ClassVar[str] = "string"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"StringValue requires str, got {type(self.value).__name__}")

    def to_json(self) -> dict[str, Any]:
        return {"stringValue": self.value}


@dataclass(frozen=True)
class TimestampValue:
    """Point in time, stored UTC-aware with microsecond precision."""

    value: datetime

    type_name: ClassVar[str] = "timestamp"

    def __post_init__(self) -> None:
        if not isinstance(self.value, datetime):
            raise ValueError(
                f"TimestampValue requires datetime, got {type(self.value).__name__}"
            )
        object.__setattr__(self, "value", ensure_utc(self.value))

    def to_json(self) -> dict[str, Any]:
        return {"timestampValue": format_timestamp(self.value)}


@dataclass(frozen=True)
class BytesValue:
    value: bytes

    type_name: ClassVar[str] = "bytes"

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise ValueError(f"BytesValue requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))

    def to_json(self) -> dict[str, Any]:
        return {"bytesValue": base64.standard_b64encode(self.value).decode("ascii")}


@dataclass(frozen=True)
class ReferenceValue:
    """Reference to another document by full resource name."""

    value: str

    type_name: ClassVar[str] = "reference"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"ReferenceValue requires str, got {type(self.value).__name__}")

    def to_json(self) -> dict[str, Any]:
        return {"referenceValue": self.value}


@dataclass(frozen=True)
class GeoPointValue:
    latitude: float
    longitude: float

    type_name: ClassVar[str] = "geoPoint"

    def __post_init__(self) -> None:
        for name in ("latitude", "longitude"):
            raw = getattr(self, name)
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"GeoPointValue.{name} must be a number")
            object.__setattr__(self, name, float(raw))
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude must be in [-180, 180], got {self.longitude}")

    def to_json(self) -> dict[str, Any]:
        return {
            "geoPointValue": {"latitude": self.latitude, "longitude": self.longitude}
        }


@dataclass(frozen=True)
class ArrayValue:
    """Ordered sequence of values; elements may be of mixed cases."""

    values: tuple[FirestoreValue, ...] = ()

    type_name: ClassVar[str] = "array"

    def __post_init__(self) -> None:
        values = tuple(self.values)
        for item in values:
            if not is_value(item):
                raise ValueError(
                    f"ArrayValue elements must be Firestore values, got {type(item).__name__}"
                )
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def to_json(self) -> dict[str, Any]:
        return {"arrayValue": {"values": [v.to_json() for v in self.values]}}


@dataclass(frozen=True)
class MapValue:
    """String-keyed mapping of values. Key order is not significant."""

    fields: Mapping[str, FirestoreValue] = field(default_factory=dict)

    type_name: ClassVar[str] = "map"

    def __post_init__(self) -> None:
        fields = dict(self.fields)
        for key, item in fields.items():
            if not isinstance(key, str):
                raise ValueError(f"MapValue keys must be str, got {type(key).__name__}")
            if not is_value(item):
                raise ValueError(
                    f"MapValue field '{key}' must be a Firestore value, got {type(item).__name__}"
                )
        object.__setattr__(self, "fields", fields)

    def __hash__(self) -> int:
        return hash(frozenset(self.fields.items()))

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def get(self, key: str) -> FirestoreValue | None:
        return self.fields.get(key)

    def to_json(self) -> dict[str, Any]:
        return {"mapValue": {"fields": fields_to_json(self.fields)}}


FirestoreValue = (
    NullValue
    | BooleanValue
    | IntegerValue
    | DoubleValue
    | StringValue
    | TimestampValue
    | BytesValue
    | ReferenceValue
    | GeoPointValue
    | ArrayValue
    | MapValue
)

VALUE_TYPES: tuple[type, ...] = (
    NullValue,
    BooleanValue,
    IntegerValue,
    DoubleValue,
    StringValue,
    TimestampValue,
    BytesValue,
    ReferenceValue,
    GeoPointValue,
    ArrayValue,
    MapValue,
)


def is_value(obj: object) -> bool:
    """Return True if obj is one of the Firestore value cases."""
    return isinstance(obj, VALUE_TYPES)


def value_type_name(value: FirestoreValue) -> str:
    """Case name used in diagnostics (e.g. 'integer', 'map')."""
    return value.type_name


def fields_to_json(fields: Mapping[str, FirestoreValue]) -> dict[str, Any]:
    """Render a field map as {name: tagged value JSON}."""
    return {k: v.to_json() for k, v in fields.items()}


# ---------------------------------------------------------------------------
# JSON -> value
# ---------------------------------------------------------------------------


def _parse_boolean(raw: Any) -> FirestoreValue:
    if not isinstance(raw, bool):
        raise ValueParseException("booleanValue must be a JSON boolean", "booleanValue")
    return BooleanValue(raw)


def _parse_integer(raw: Any) -> FirestoreValue:
    if isinstance(raw, bool):
        raise ValueParseException("integerValue must be a decimal string", "integerValue")
    if isinstance(raw, int):
        number = raw
    elif isinstance(raw, str):
        try:
            number = int(raw, 10)
        except ValueError as e:
            raise ValueParseException(
                f"integerValue is not a decimal integer: {raw!r}", "integerValue"
            ) from e
    else:
        raise ValueParseException("integerValue must be a decimal string", "integerValue")
    try:
        return IntegerValue(number)
    except ValueError as e:
        raise ValueParseException(str(e), "integerValue") from e


def _parse_double(raw: Any) -> FirestoreValue:
    if isinstance(raw, str) and raw in _NON_FINITE_FROM_JSON:
        return DoubleValue(_NON_FINITE_FROM_JSON[raw])
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueParseException("doubleValue must be a JSON number", "doubleValue")
    return DoubleValue(float(raw))


def _parse_string(raw: Any) -> FirestoreValue:
    if not isinstance(raw, str):
        raise ValueParseException("stringValue must be a JSON string", "stringValue")
    return StringValue(raw)


def _parse_timestamp(raw: Any) -> FirestoreValue:
    parsed = parse_timestamp(raw) if isinstance(raw, str) else None
    if parsed is None:
        raise ValueParseException(
            f"timestampValue is not an RFC 3339 timestamp: {raw!r}", "timestampValue"
        )
    return TimestampValue(parsed)


def _parse_bytes(raw: Any) -> FirestoreValue:
    if not isinstance(raw, str):
        raise ValueParseException("bytesValue must be a base64 string", "bytesValue")
    try:
        return BytesValue(base64.b64decode(raw, validate=True))
    except binascii.Error:
        try:
            # URL-safe alphabet is also valid proto3 JSON.
            return BytesValue(base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4)))
        except binascii.Error as e:
            raise ValueParseException("bytesValue is not valid base64", "bytesValue") from e


def _parse_reference(raw: Any) -> FirestoreValue:
    if not isinstance(raw, str):
        raise ValueParseException("referenceValue must be a JSON string", "referenceValue")
    return ReferenceValue(raw)


def _parse_geo_point(raw: Any) -> FirestoreValue:
    if not isinstance(raw, dict):
        raise ValueParseException("geoPointValue must be an object", "geoPointValue")
    try:
        return GeoPointValue(
            latitude=raw.get("latitude", 0.0), longitude=raw.get("longitude", 0.0)
        )
    except ValueError as e:
        raise ValueParseException(str(e), "geoPointValue") from e


def _parse_array(raw: Any) -> FirestoreValue:
    if not isinstance(raw, dict):
        raise ValueParseException("arrayValue must be an object", "arrayValue")
    values = raw.get("values") or []
    if not isinstance(values, list):
        raise ValueParseException("arrayValue.values must be a list", "arrayValue")
    return ArrayValue(tuple(parse_value(v) for v in values))


def _parse_map(raw: Any) -> FirestoreValue:
    if not isinstance(raw, dict):
        raise ValueParseException("mapValue must be an object", "mapValue")
    return MapValue(parse_fields(raw.get("fields")))


_PARSERS = {
    "nullValue": lambda raw: NullValue(),
    "booleanValue": _parse_boolean,
    "integerValue": _parse_integer,
    "doubleValue": _parse_double,
    "stringValue": _parse_string,
    "timestampValue": _parse_timestamp,
    "bytesValue": _parse_bytes,
    "referenceValue": _parse_reference,
    "geoPointValue": _parse_geo_point,
    "arrayValue": _parse_array,
    "mapValue": _parse_map,
}


def parse_value(obj: Any) -> FirestoreValue:
    """Parse tagged-value JSON into a FirestoreValue.

    An object with no recognized tag yields NullValue; unrecognized tags
    are logged. Malformed payloads for a recognized tag raise.

    Raises:
        ValueParseException: If obj is not an object or a tagged payload is malformed.
    """
    if not isinstance(obj, dict):
        raise ValueParseException(
            f"Tagged value must be a JSON object, got {type(obj).__name__}"
        )
    for tag, raw in obj.items():
        parser = _PARSERS.get(tag)
        if parser is not None:
            return parser(raw)
    if obj:
        logger.warning("Unrecognized Firestore value tag(s) %s; treating as null", sorted(obj))
    return NullValue()


def parse_fields(obj: Any) -> dict[str, FirestoreValue]:
    """Parse a {name: tagged value} object (Document.fields / MapValue.fields)."""
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueParseException("fields must be a JSON object")
    return {k: parse_value(v) for k, v in obj.items()}


# ---------------------------------------------------------------------------
# value -> plain Python
# ---------------------------------------------------------------------------


def to_python(value: FirestoreValue) -> Any:
    """Convert a value tree to plain Python objects.

    Geo points stay GeoPointValue; references become their path string.
    """
    if isinstance(value, NullValue):
        return None
    if isinstance(value, MapValue):
        return {k: to_python(v) for k, v in value.fields.items()}
    if isinstance(value, ArrayValue):
        return [to_python(v) for v in value.values]
    if isinstance(value, GeoPointValue):
        return value
    return value.value


def array_of(values: Iterable[FirestoreValue]) -> ArrayValue:
    """Build an ArrayValue from any iterable of values."""
    return ArrayValue(tuple(values))
