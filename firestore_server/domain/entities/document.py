"""Firestore document entity.

Mirrors the REST Document resource:

    {
      "name": "projects/p/databases/(default)/documents/users/alice",
      "fields": {"name": {"stringValue": "Alice"}},
      "createTime": "2024-01-01T00:00:00.000000Z",
      "updateTime": "2024-01-01T00:00:00.000000Z"
    }

Documents are immutable; with_fields/without_fields return new documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from firestore_server.core.constants import DOCUMENTS_SEGMENT
from firestore_server.domain.exceptions import DocumentParseException
from firestore_server.domain.value_objects.values import (
    FirestoreValue,
    MapValue,
    fields_to_json,
    is_value,
    parse_fields,
)
from firestore_server.shared.utils.datetime import ensure_utc, parse_timestamp


@dataclass(frozen=True)
class Document:
    """Named resource with a map of fields and optional server timestamps."""

    name: str
    fields: Mapping[str, FirestoreValue] = field(default_factory=dict)
    create_time: datetime | None = None
    update_time: datetime | None = None

    def __post_init__(self) -> None:
        fields = dict(self.fields)
        for key, value in fields.items():
            if not is_value(value):
                raise ValueError(
                    f"Document field '{key}' must be a Firestore value, got {type(value).__name__}"
                )
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "create_time", ensure_utc(self.create_time))
        object.__setattr__(self, "update_time", ensure_utc(self.update_time))

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.fields.items()), self.create_time, self.update_time))

    @property
    def document_path(self) -> str | None:
        """Path after '/documents/' (e.g. 'users/alice'), or None."""
        _, sep, rest = self.name.partition(DOCUMENTS_SEGMENT)
        return rest if sep else None

    @property
    def document_id(self) -> str | None:
        parts = [p for p in self.name.split("/") if p]
        return parts[-1] if parts else None

    def get(self, field_name: str) -> FirestoreValue | None:
        return self.fields.get(field_name)

    def as_map(self) -> MapValue:
        return MapValue(self.fields)

    def with_fields(self, updates: Mapping[str, FirestoreValue]) -> Document:
        """Return a copy with the given fields added or replaced."""
        return replace(self, fields={**self.fields, **updates})

    def without_fields(self, *names: str) -> Document:
        """Return a copy with the given fields removed."""
        return replace(
            self, fields={k: v for k, v in self.fields.items() if k not in names}
        )

    @classmethod
    def from_json(cls, obj: Any) -> Document:
        """Parse a REST Document object.

        Raises:
            DocumentParseException: If obj is not an object or 'name' is missing.
            ValueParseException: If a field value is malformed.
        """
        if not isinstance(obj, dict):
            raise DocumentParseException(
                f"Document JSON must be an object, got {type(obj).__name__}"
            )
        name = obj.get("name")
        if not isinstance(name, str):
            raise DocumentParseException("Document JSON is missing 'name' field")
        return cls(
            name=name,
            fields=parse_fields(obj.get("fields")),
            create_time=parse_timestamp(obj.get("createTime")),
            update_time=parse_timestamp(obj.get("updateTime")),
        )

    def to_json(self) -> dict[str, Any]:
        """Write body: fields only (name and times are server-managed)."""
        return {"fields": fields_to_json(self.fields)}
