"""Encodes Python values (records, sequences, scalars) into Firestore values.

Dispatch is an explicit check over a closed set of kinds. Date/time and
binary types are recognized before falling through to record / sequence
recursion:

    FirestoreValue          -> unchanged
    None                    -> null
    Enum                    -> its .value, encoded
    bool                    -> boolean
    int                     -> integer (must fit in 64 bits)
    float                   -> double
    str                     -> string
    bytes/bytearray/memoryview -> bytes
    datetime                -> timestamp
    DocumentReference       -> reference
    dataclass / BaseModel   -> map (pydantic aliases honoured)
    Mapping[str, ...]       -> map
    list/tuple/set/frozenset -> array

Anything else raises UnsupportedTypeException with the failing path.

Example:
    @dataclass
    class User:
        name: str
        age: int

    FirestoreEncoder().encode(User("Alice", 30))
    # {"name": StringValue("Alice"), "age": IntegerValue(30)}
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

from firestore_server.core.constants import INT64_MAX, INT64_MIN
from firestore_server.domain.entities.document import Document
from firestore_server.domain.exceptions import (
    CodingPath,
    TopLevelNotObjectException,
    UnsupportedTypeException,
)
from firestore_server.domain.value_objects.references import DocumentReference
from firestore_server.domain.value_objects.values import (
    ArrayValue,
    BooleanValue,
    BytesValue,
    DoubleValue,
    FirestoreValue,
    IntegerValue,
    MapValue,
    NullValue,
    StringValue,
    TimestampValue,
    is_value,
)


class FirestoreEncoder:
    """Stateless encoder; safe to share between threads.

    Args:
        omit_none: When True, record attributes and mapping entries whose
            value is None are left out instead of written as null.
    """

    def __init__(self, *, omit_none: bool = False) -> None:
        self.omit_none = omit_none

    def encode(self, obj: Any) -> dict[str, FirestoreValue]:
        """Encode a record into a document field map.

        Raises:
            TopLevelNotObjectException: If obj does not encode to a map.
            UnsupportedTypeException: If any leaf has no Firestore representation.
        """
        value = self.encode_value(obj)
        if not isinstance(value, MapValue):
            raise TopLevelNotObjectException(value.type_name)
        return dict(value.fields)

    def encode_value(self, obj: Any) -> FirestoreValue:
        """Encode any supported value into a single FirestoreValue."""
        return self._encode(obj, ())

    def encode_document(self, obj: Any, name: str) -> Document:
        """Encode a record as a Document with the given resource name."""
        return Document(name=name, fields=self.encode(obj))

    def _encode(self, obj: Any, path: CodingPath) -> FirestoreValue:
        if is_value(obj):
            return obj
        if obj is None:
            return NullValue()
        if isinstance(obj, Enum):
            return self._encode(obj.value, path)
        if isinstance(obj, bool):
            return BooleanValue(obj)
        if isinstance(obj, int):
            if not INT64_MIN <= obj <= INT64_MAX:
                raise UnsupportedTypeException(
                    type(obj), path, "integer out of 64-bit range"
                )
            return IntegerValue(obj)
        if isinstance(obj, float):
            return DoubleValue(obj)
        if isinstance(obj, str):
            return StringValue(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return BytesValue(bytes(obj))
        if isinstance(obj, datetime):
            return TimestampValue(obj)
        if isinstance(obj, DocumentReference):
            return obj.as_value()
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return self._encode_items(
                ((f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)),
                path,
            )
        if isinstance(obj, BaseModel):
            return self._encode_items(
                (
                    (info.alias or name, getattr(obj, name))
                    for name, info in type(obj).model_fields.items()
                ),
                path,
            )
        if isinstance(obj, Mapping):
            for key in obj:
                if not isinstance(key, str):
                    raise UnsupportedTypeException(
                        type(key), [*path, repr(key)], "map keys must be str"
                    )
            return self._encode_items(obj.items(), path)
        if isinstance(obj, (list, tuple, set, frozenset)):
            return ArrayValue(
                tuple(self._encode(item, [*path, i]) for i, item in enumerate(obj))
            )
        raise UnsupportedTypeException(type(obj), path)

    def _encode_items(self, items, path: CodingPath) -> MapValue:
        fields: dict[str, FirestoreValue] = {}
        for key, item in items:
            if item is None and self.omit_none:
                continue
            fields[key] = self._encode(item, [*path, key])
        return MapValue(fields)
