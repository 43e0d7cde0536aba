"""Decodes Firestore values into Python values, guided by a target type.

The decoder is the inverse of FirestoreEncoder. The caller names the shape
it wants (a dataclass, a pydantic model, list[int], dict[str, float],
datetime | None, ...) and the decoder walks the value tree, checking at
every step that the value's case fits the requested kind. The first
mismatch aborts the call with the failing key/index/type.

Rules:
    - float targets accept integer values (widening); int targets reject
      double values; bool and int are distinct.
    - A missing record field uses the field default, or None for an
      Optional field; otherwise KeyNotFoundException.
    - Reading past the end of an array raises OutOfBoundsException.

Keyed and unkeyed containers are exposed for callers that need to tell
"absent" from "explicit null" or to consume an array step by step.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections import abc
from collections.abc import Mapping, Sequence
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from firestore_server.domain.entities.document import Document
from firestore_server.domain.exceptions import (
    CodingPath,
    DecodingException,
    KeyNotFoundException,
    OutOfBoundsException,
    TypeMismatchException,
    format_coding_path,
)
from firestore_server.domain.value_objects.values import (
    VALUE_TYPES,
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
    to_python,
)

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_UNION_ORIGINS = (Union, types.UnionType)
_SEQUENCE_ORIGINS = (list, abc.Sequence, abc.MutableSequence, abc.Iterable, abc.Collection)
_SET_ORIGINS = (set, frozenset, abc.Set, abc.MutableSet)
_MAPPING_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)


def _is_optional(target: Any) -> bool:
    if target is Any:
        return True
    return get_origin(target) in _UNION_ORIGINS and _NONE_TYPE in get_args(target)


@lru_cache(maxsize=256)
def _dataclass_hints(cls: type) -> dict[str, Any]:
    return typing.get_type_hints(cls)


def _expected_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


class KeyedDecodingContainer:
    """Read access to the fields of a map value."""

    def __init__(
        self,
        decoder: FirestoreDecoder,
        fields: Mapping[str, FirestoreValue],
        coding_path: CodingPath = (),
    ) -> None:
        self._decoder = decoder
        self._fields = fields
        self.coding_path = list(coding_path)

    @property
    def all_keys(self) -> list[str]:
        return list(self._fields)

    def contains(self, key: str) -> bool:
        """True when the key is present, including when it holds an explicit null."""
        return key in self._fields

    def decode_nil(self, key: str) -> bool:
        """True when the key is absent or holds an explicit null."""
        value = self._fields.get(key)
        return value is None or isinstance(value, NullValue)

    def decode(self, target: Any, key: str) -> Any:
        """Decode a required field.

        Raises:
            KeyNotFoundException: If the key is absent.
            TypeMismatchException: If the value does not fit target.
        """
        return self._decoder._decode(target, self._value(key), [*self.coding_path, key])

    def decode_if_present(self, target: Any, key: str) -> Any:
        """Decode a field, returning None when it is absent or null."""
        if self.decode_nil(key):
            return None
        return self.decode(target, key)

    def nested_keyed(self, key: str) -> KeyedDecodingContainer:
        value = self._value(key)
        path = [*self.coding_path, key]
        if not isinstance(value, MapValue):
            raise TypeMismatchException("map", value.type_name, path)
        return KeyedDecodingContainer(self._decoder, value.fields, path)

    def nested_unkeyed(self, key: str) -> UnkeyedDecodingContainer:
        value = self._value(key)
        path = [*self.coding_path, key]
        if not isinstance(value, ArrayValue):
            raise TypeMismatchException("array", value.type_name, path)
        return UnkeyedDecodingContainer(self._decoder, value.values, path)

    def _value(self, key: str) -> FirestoreValue:
        try:
            return self._fields[key]
        except KeyError:
            raise KeyNotFoundException(key, self.coding_path) from None


class UnkeyedDecodingContainer:
    """Forward-only reader over the elements of an array value.

    current_index advances after each successful decode and never rewinds.
    """

    def __init__(
        self,
        decoder: FirestoreDecoder,
        values: Sequence[FirestoreValue],
        coding_path: CodingPath = (),
    ) -> None:
        self._decoder = decoder
        self._values = values
        self.coding_path = list(coding_path)
        self.current_index = 0

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def is_at_end(self) -> bool:
        return self.current_index >= len(self._values)

    def decode_nil(self) -> bool:
        """Consume the next element if it is null and return True; otherwise False.

        Raises:
            OutOfBoundsException: If the container is exhausted.
        """
        value = self._peek()
        if isinstance(value, NullValue):
            self.current_index += 1
            return True
        return False

    def decode(self, target: Any) -> Any:
        """Decode the next element and advance.

        Raises:
            OutOfBoundsException: If the container is exhausted.
            TypeMismatchException: If the element does not fit target.
        """
        value = self._peek()
        result = self._decoder._decode(
            target, value, [*self.coding_path, self.current_index]
        )
        self.current_index += 1
        return result

    def nested_keyed(self) -> KeyedDecodingContainer:
        value = self._peek()
        path = [*self.coding_path, self.current_index]
        if not isinstance(value, MapValue):
            raise TypeMismatchException("map", value.type_name, path)
        self.current_index += 1
        return KeyedDecodingContainer(self._decoder, value.fields, path)

    def nested_unkeyed(self) -> UnkeyedDecodingContainer:
        value = self._peek()
        path = [*self.coding_path, self.current_index]
        if not isinstance(value, ArrayValue):
            raise TypeMismatchException("array", value.type_name, path)
        self.current_index += 1
        return UnkeyedDecodingContainer(self._decoder, value.values, path)

    def _peek(self) -> FirestoreValue:
        if self.is_at_end:
            raise OutOfBoundsException(self.current_index, self.coding_path)
        return self._values[self.current_index]


class FirestoreDecoder:
    """Stateless decoder; safe to share between threads."""

    def decode(
        self,
        target: Any,
        source: Document | Mapping[str, FirestoreValue] | FirestoreValue,
    ) -> Any:
        """Decode a document, a field map or a single value into target.

        Raises:
            DecodingException: On the first missing key, type mismatch or
                out-of-bounds read.
        """
        if isinstance(source, Document):
            value: FirestoreValue = MapValue(source.fields)
        elif is_value(source):
            value = source
        else:
            value = MapValue(source)
        return self._decode(target, value, [])

    def decode_value(self, target: Any, value: FirestoreValue) -> Any:
        return self._decode(target, value, [])

    def keyed_container(
        self, source: Document | Mapping[str, FirestoreValue] | FirestoreValue
    ) -> KeyedDecodingContainer:
        """Keyed container over a document, field map or map value."""
        if isinstance(source, Document):
            return KeyedDecodingContainer(self, source.fields)
        if isinstance(source, MapValue):
            return KeyedDecodingContainer(self, source.fields)
        if is_value(source):
            raise TypeMismatchException("map", source.type_name)
        return KeyedDecodingContainer(self, source)

    def unkeyed_container(self, value: FirestoreValue) -> UnkeyedDecodingContainer:
        if not isinstance(value, ArrayValue):
            raise TypeMismatchException("array", value.type_name)
        return UnkeyedDecodingContainer(self, value.values)

    # -- dispatch ------------------------------------------------------------

    def _decode(self, target: Any, value: FirestoreValue, path: CodingPath) -> Any:
        if target is Any or target is object:
            return to_python(value)
        if target == FirestoreValue:
            return value
        if isinstance(target, type) and target in VALUE_TYPES:
            if not isinstance(value, target):
                raise TypeMismatchException(target.type_name, value.type_name, path)
            return value
        if target is None or target is _NONE_TYPE:
            if not isinstance(value, NullValue):
                raise TypeMismatchException("null", value.type_name, path)
            return None

        origin = get_origin(target)
        if origin is typing.Annotated:
            return self._decode(get_args(target)[0], value, path)
        if origin in _UNION_ORIGINS:
            return self._decode_union(target, value, path)
        if origin is typing.Literal:
            raw = to_python(value)
            if raw not in get_args(target):
                raise TypeMismatchException(repr(target), f"{value.type_name} {raw!r}", path)
            return raw
        if origin is not None:
            return self._decode_generic(target, origin, get_args(target), value, path)

        if not isinstance(target, type):
            raise DecodingException(
                f"Unsupported target type: {target!r}",
                "UNSUPPORTED_TARGET_TYPE",
                {"path": format_coding_path(path)},
            )
        if issubclass(target, Enum):
            return self._decode_enum(target, value, path)
        if target is bool:
            return self._expect(value, BooleanValue, "boolean", path).value
        if issubclass(target, int) and not issubclass(target, bool):
            return target(self._expect(value, IntegerValue, "integer", path).value)
        if issubclass(target, float):
            if isinstance(value, IntegerValue):
                return target(value.value)
            return target(self._expect(value, DoubleValue, "double", path).value)
        if issubclass(target, str):
            return target(self._expect(value, StringValue, "string", path).value)
        if target in (bytes, bytearray):
            return target(self._expect(value, BytesValue, "bytes", path).value)
        if issubclass(target, datetime):
            return self._expect(value, TimestampValue, "timestamp", path).value
        if target in (list, tuple, set, frozenset, dict):
            return self._decode_generic(target, target, (), value, path)
        if dataclasses.is_dataclass(target):
            return self._decode_dataclass(target, value, path)
        if issubclass(target, BaseModel):
            return self._decode_model(target, value, path)
        raise DecodingException(
            f"Unsupported target type: {target.__qualname__}",
            "UNSUPPORTED_TARGET_TYPE",
            {"path": format_coding_path(path)},
        )

    @staticmethod
    def _expect(value: FirestoreValue, case: type, expected: str, path: CodingPath):
        if not isinstance(value, case):
            raise TypeMismatchException(expected, value.type_name, path)
        return value

    def _decode_union(self, target: Any, value: FirestoreValue, path: CodingPath) -> Any:
        members = get_args(target)
        if isinstance(value, NullValue) and _NONE_TYPE in members:
            return None
        candidates = [m for m in members if m is not _NONE_TYPE]
        if len(candidates) == 1:
            return self._decode(candidates[0], value, path)
        for member in candidates:
            try:
                return self._decode(member, value, path)
            except DecodingException:
                logger.debug(
                    "Union member %s did not match %s at '%s'",
                    _expected_name(member),
                    value.type_name,
                    format_coding_path(path),
                )
        raise TypeMismatchException(
            " | ".join(_expected_name(m) for m in members), value.type_name, path
        )

    def _decode_enum(self, target: type[Enum], value: FirestoreValue, path: CodingPath):
        if isinstance(value, (StringValue, IntegerValue)):
            raw = value.value
        else:
            raise TypeMismatchException(target.__name__, value.type_name, path)
        try:
            return target(raw)
        except ValueError as e:
            raise TypeMismatchException(
                target.__name__, f"{value.type_name} {raw!r}", path
            ) from e

    def _decode_generic(
        self,
        target: Any,
        origin: Any,
        args: tuple[Any, ...],
        value: FirestoreValue,
        path: CodingPath,
    ) -> Any:
        if origin in _MAPPING_ORIGINS:
            if not isinstance(value, MapValue):
                raise TypeMismatchException("map", value.type_name, path)
            item_type = args[1] if len(args) == 2 else Any
            container = KeyedDecodingContainer(self, value.fields, path)
            return {key: container.decode(item_type, key) for key in container.all_keys}

        if not isinstance(value, ArrayValue):
            raise TypeMismatchException("array", value.type_name, path)
        container = UnkeyedDecodingContainer(self, value.values, path)

        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                item_type = args[0]
            elif args:
                items = [container.decode(item) for item in args]
                if not container.is_at_end:
                    raise TypeMismatchException(
                        f"array of length {len(args)}",
                        f"array of length {container.count}",
                        path,
                    )
                return tuple(items)
            else:
                item_type = Any
            return tuple(self._drain(container, item_type))

        item_type = args[0] if args else Any
        if origin in _SET_ORIGINS:
            items = self._drain(container, item_type)
            return frozenset(items) if origin is frozenset else set(items)
        if origin in _SEQUENCE_ORIGINS:
            return self._drain(container, item_type)
        raise DecodingException(
            f"Unsupported target type: {target!r}",
            "UNSUPPORTED_TARGET_TYPE",
            {"path": format_coding_path(path)},
        )

    @staticmethod
    def _drain(container: UnkeyedDecodingContainer, item_type: Any) -> list[Any]:
        items = []
        while not container.is_at_end:
            items.append(container.decode(item_type))
        return items

    def _decode_dataclass(self, target: type, value: FirestoreValue, path: CodingPath):
        if not isinstance(value, MapValue):
            raise TypeMismatchException("map", value.type_name, path)
        container = KeyedDecodingContainer(self, value.fields, path)
        hints = _dataclass_hints(target)
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(target):
            if not f.init:
                continue
            hint = hints.get(f.name, Any)
            if container.contains(f.name):
                kwargs[f.name] = container.decode(hint, f.name)
            elif (
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            ):
                continue
            elif _is_optional(hint):
                kwargs[f.name] = None
            else:
                raise KeyNotFoundException(f.name, path)
        return target(**kwargs)

    def _decode_model(
        self, target: type[BaseModel], value: FirestoreValue, path: CodingPath
    ) -> BaseModel:
        if not isinstance(value, MapValue):
            raise TypeMismatchException("map", value.type_name, path)
        container = KeyedDecodingContainer(self, value.fields, path)
        data: dict[str, Any] = {}
        for name, info in target.model_fields.items():
            key = info.alias or name
            annotation = info.annotation if info.annotation is not None else Any
            if container.contains(key):
                data[key] = container.decode(annotation, key)
            elif not info.is_required():
                continue
            elif _is_optional(annotation):
                data[key] = None
            else:
                raise KeyNotFoundException(key, path)
        try:
            return target.model_validate(data)
        except ValidationError as e:
            raise DecodingException(
                f"Model validation failed for {target.__name__}: {e}",
                "MODEL_VALIDATION_ERROR",
                {"path": format_coding_path(path), "errors": e.errors()},
            ) from e
