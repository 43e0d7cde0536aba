"""Building blocks of a structured query: field references, ordering,
cursors, projections and collection selectors.

Each type is an immutable value with a to_json() matching the REST
StructuredQuery schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from firestore_server.core.constants import DOCUMENT_ID_FIELD_PATH
from firestore_server.domain.enums import SortDirection
from firestore_server.domain.value_objects.values import FirestoreValue


@dataclass(frozen=True)
class FieldReference:
    """Reference to a field by dotted path (e.g. 'address.city')."""

    field_path: str

    DOCUMENT_ID: ClassVar[FieldReference]

    def __post_init__(self) -> None:
        if not self.field_path:
            raise ValueError("Field path must be a non-empty string")

    @classmethod
    def of(cls, field: str | FieldReference) -> FieldReference:
        return field if isinstance(field, FieldReference) else cls(field)

    def to_json(self) -> dict[str, Any]:
        return {"fieldPath": self.field_path}


FieldReference.DOCUMENT_ID = FieldReference(DOCUMENT_ID_FIELD_PATH)


@dataclass(frozen=True)
class QueryOrder:
    field: FieldReference
    direction: SortDirection = SortDirection.ASCENDING

    def to_json(self) -> dict[str, Any]:
        return {"field": self.field.to_json(), "direction": self.direction.value}


@dataclass(frozen=True)
class QueryCursor:
    """Pagination boundary.

    before=True excludes the cursor values themselves on that side of the
    result set; before=False includes them.
    """

    values: tuple[FirestoreValue, ...]
    before: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def at(cls, *values: FirestoreValue) -> QueryCursor:
        """Cursor that includes the given values."""
        return cls(values, before=False)

    @classmethod
    def before_values(cls, *values: FirestoreValue) -> QueryCursor:
        """Cursor that excludes the given values."""
        return cls(values, before=True)

    @property
    def inclusive(self) -> bool:
        return not self.before

    def to_json(self) -> dict[str, Any]:
        return {"values": [v.to_json() for v in self.values], "before": self.before}


@dataclass(frozen=True)
class QueryProjection:
    fields: tuple[FieldReference, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def of(cls, *field_paths: str | FieldReference) -> QueryProjection:
        return cls(tuple(FieldReference.of(p) for p in field_paths))

    def to_json(self) -> dict[str, Any]:
        return {"fields": [f.to_json() for f in self.fields]}


@dataclass(frozen=True)
class CollectionSelector:
    """Collection a query scans; all_descendants widens it to a collection group."""

    collection_id: str
    all_descendants: bool = False

    def __post_init__(self) -> None:
        if not self.collection_id or "/" in self.collection_id:
            raise ValueError(
                f"Collection ID must be a non-empty single segment, got {self.collection_id!r}"
            )

    def to_json(self) -> dict[str, Any]:
        return {
            "collectionId": self.collection_id,
            "allDescendants": self.all_descendants,
        }
