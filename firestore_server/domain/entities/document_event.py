"""Firestore document change event (Eventarc, JSON payload form).

Payload shape (google.events.cloud.firestore.v1.DocumentEventData):

    {
      "value":      {Document} | absent,   # state after the change
      "oldValue":   {Document} | absent,   # state before the change
      "updateMask": {"fieldPaths": [...]}  # updated fields, for updates
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from firestore_server.domain.entities.document import Document
from firestore_server.domain.exceptions import DocumentParseException


@dataclass(frozen=True)
class FirestoreDocumentEvent:
    value: Document | None = None
    old_value: Document | None = None
    update_mask: tuple[str, ...] | None = None

    @classmethod
    def from_json(cls, obj: Any) -> FirestoreDocumentEvent:
        """Parse the JSON event payload.

        Raises:
            DocumentParseException: If the payload or a document in it is malformed.
        """
        if not isinstance(obj, dict):
            raise DocumentParseException(
                f"Event payload must be an object, got {type(obj).__name__}"
            )
        value = obj.get("value")
        old_value = obj.get("oldValue")
        mask = obj.get("updateMask") or {}
        field_paths = mask.get("fieldPaths") if isinstance(mask, dict) else None
        return cls(
            value=Document.from_json(value) if value else None,
            old_value=Document.from_json(old_value) if old_value else None,
            update_mask=tuple(field_paths) if field_paths else None,
        )

    @property
    def document(self) -> Document | None:
        """Current document, or the deleted one for delete events."""
        return self.value or self.old_value

    @property
    def is_create(self) -> bool:
        return self.value is not None and self.old_value is None

    @property
    def is_delete(self) -> bool:
        return self.value is None and self.old_value is not None

    @property
    def is_update(self) -> bool:
        return self.value is not None and self.old_value is not None

    def changed_fields(self) -> set[str]:
        """Top-level field names whose values differ between old and new state.

        Uses the update mask when present.
        """
        if self.update_mask:
            return {path.split(".", 1)[0] for path in self.update_mask}
        before = self.old_value.fields if self.old_value else {}
        after = self.value.fields if self.value else {}
        return {k for k in before.keys() | after.keys() if before.get(k) != after.get(k)}
