"""Shape Firestore REST request bodies and parse response bodies.

A transport calls these immediately before sending / after receiving;
nothing here performs I/O.
"""

import logging
from collections.abc import Iterable
from typing import Any

from firestore_server.application.services.firestore_encoder import FirestoreEncoder
from firestore_server.domain.entities.document import Document
from firestore_server.domain.exceptions import DocumentParseException
from firestore_server.domain.query.query import Query
from firestore_server.domain.value_objects.values import (
    fields_to_json,
    parse_fields,
    to_python,
)

logger = logging.getLogger(__name__)

_encoder = FirestoreEncoder()


def encode_document(data: Any) -> dict:
    """Convert a record (dict, dataclass or model) to a REST write body {"fields": ...}."""
    return {"fields": fields_to_json(_encoder.encode(data))}


def decode_document(obj: dict) -> Document:
    """Parse a REST Document object (name, fields, createTime, updateTime)."""
    return Document.from_json(obj)


def decode_fields(obj: dict | None) -> dict:
    """Convert a REST Document's fields to a plain Python dict."""
    if not obj:
        return {}
    return {k: to_python(v) for k, v in parse_fields(obj.get("fields")).items()}


def run_query_body(query: Query) -> dict:
    """Request body for POST {parent}:runQuery."""
    return {"structuredQuery": query.build_structured_query()}


def parse_run_query_response(items: Any) -> list[Document]:
    """Documents from a runQuery response stream.

    Items without 'document' (e.g. the trailing readTime-only item of an
    empty result) are skipped; an item that is not an object raises
    DocumentParseException.
    """
    if not items:
        return []
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        raise DocumentParseException("runQuery response must be a JSON array")
    documents = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise DocumentParseException(
                f"runQuery response item {index} must be an object, got {type(item).__name__}"
            )
        if "document" in item:
            documents.append(Document.from_json(item["document"]))
    logger.debug("runQuery returned %d document(s) in %d item(s)", len(documents), len(items))
    return documents


def parse_list_documents_response(obj: dict | None) -> tuple[list[Document], str | None]:
    """Documents and next page token from a listDocuments response."""
    if not obj:
        return [], None
    documents = [Document.from_json(doc) for doc in obj.get("documents") or []]
    return documents, obj.get("nextPageToken") or None


def update_mask_params(field_paths: Iterable[str]) -> list[tuple[str, str]]:
    """Query parameters restricting a PATCH to the given field paths."""
    return [("updateMask.fieldPaths", path) for path in field_paths]
