"""Exceptions raised by the Firestore codec, query builder and path helpers.

All errors are local and recoverable: they are raised to the immediate
caller and never retried or swallowed inside the library. Each carries a
machine-readable error_code and a details dict so callers can report the
precise failing key, index or type.
"""

import json
from collections.abc import Sequence
from typing import Any

CodingPath = Sequence[str | int]


def format_coding_path(path: CodingPath) -> str:
    """Render a coding path as a dotted string (e.g. 'address.tags[2]')."""
    out = ""
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out


class FirestoreServerException(Exception):
    """Base exception for all firestore_server errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. key, path, type).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class EncodingException(FirestoreServerException):
    """Base class for failures while encoding Python values to Firestore values."""


class TopLevelNotObjectException(EncodingException):
    """Raised when a document-level encode does not produce a map."""

    def __init__(self, actual: str) -> None:
        """Initialize with the value case the input encoded to.

        Args:
            actual: Name of the produced value case (e.g. 'array').
        """
        super().__init__(
            f"Top-level value must encode to an object (map), got {actual}",
            "TOP_LEVEL_NOT_OBJECT",
            {"actual": actual},
        )


class UnsupportedTypeException(EncodingException):
    """Raised when a leaf value has no Firestore representation."""

    def __init__(
        self, value_type: type, path: CodingPath = (), reason: str | None = None
    ) -> None:
        """Initialize with the offending type and where it was found.

        Args:
            value_type: Python type that could not be encoded.
            path: Coding path of the failing element.
            reason: Optional extra explanation (e.g. integer out of range).
        """
        where = format_coding_path(path)
        message = f"Unsupported type for Firestore encoding: {value_type.__qualname__}"
        if where:
            message += f" at '{where}'"
        if reason:
            message += f" ({reason})"
        details: dict[str, Any] = {"type": value_type.__qualname__, "path": where}
        if reason:
            details["reason"] = reason
        super().__init__(message, "UNSUPPORTED_TYPE", details)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class DecodingException(FirestoreServerException):
    """Base class for failures while decoding Firestore values to Python values."""


class KeyNotFoundException(DecodingException):
    """Raised when a required field is absent from a map value."""

    def __init__(self, key: str, path: CodingPath = ()) -> None:
        """Initialize with the missing key.

        Args:
            key: Field name that was not present.
            path: Coding path of the containing map.
        """
        where = format_coding_path([*path, key])
        super().__init__(
            f"Key not found: '{where}'",
            "KEY_NOT_FOUND",
            {"key": key, "path": where},
        )


class TypeMismatchException(DecodingException):
    """Raised when a value's case does not match the requested type."""

    def __init__(self, expected: str, actual: str, path: CodingPath = ()) -> None:
        """Initialize with expected and actual kinds.

        Args:
            expected: Kind the caller asked for (e.g. 'integer').
            actual: Case of the value found (e.g. 'double').
            path: Coding path of the value.
        """
        where = format_coding_path(path)
        message = f"Type mismatch: expected {expected}, got {actual}"
        if where:
            message += f" at '{where}'"
        super().__init__(
            message,
            "TYPE_MISMATCH",
            {"expected": expected, "actual": actual, "path": where},
        )


class OutOfBoundsException(DecodingException):
    """Raised when reading past the end of an array value."""

    def __init__(self, index: int, path: CodingPath = ()) -> None:
        """Initialize with the index that was requested.

        Args:
            index: Position that does not exist.
            path: Coding path of the array.
        """
        where = format_coding_path(path)
        super().__init__(
            f"Index {index} out of bounds" + (f" at '{where}'" if where else ""),
            "OUT_OF_BOUNDS",
            {"index": index, "path": where},
        )


# ---------------------------------------------------------------------------
# Wire parsing
# ---------------------------------------------------------------------------


class ValueParseException(FirestoreServerException):
    """Raised when tagged-value JSON is structurally malformed."""

    def __init__(self, message: str, tag: str | None = None) -> None:
        details = {"tag": tag} if tag else {}
        super().__init__(message, "VALUE_PARSE_ERROR", details)


class DocumentParseException(FirestoreServerException):
    """Raised when document JSON lacks required members or is not an object."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "DOCUMENT_PARSE_ERROR")


# ---------------------------------------------------------------------------
# Paths and schema
# ---------------------------------------------------------------------------


class PathException(FirestoreServerException):
    """Base class for invalid collection/document paths."""


class EmptyPathException(PathException):
    """Raised when a path has no segments."""

    def __init__(self) -> None:
        super().__init__("Path cannot be empty", "EMPTY_PATH")


class InvalidCollectionPathException(PathException):
    """Raised when a collection path has an even number of segments."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Invalid collection path: '{path}' (must have odd number of segments)",
            "INVALID_COLLECTION_PATH",
            {"path": path},
        )


class InvalidDocumentPathException(PathException):
    """Raised when a document path has an odd number of segments."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Invalid document path: '{path}' (must have even number of segments >= 2)",
            "INVALID_DOCUMENT_PATH",
            {"path": path},
        )


class SchemaRegistrationException(FirestoreServerException):
    """Raised when a collection is registered twice or looked up before registration."""

    def __init__(self, message: str, collection_id: str) -> None:
        super().__init__(
            message, "SCHEMA_REGISTRATION_ERROR", {"collection_id": collection_id}
        )


# ---------------------------------------------------------------------------
# REST API errors
# ---------------------------------------------------------------------------

_STATUS_CODES: dict[int, str] = {
    400: "INVALID_ARGUMENT",
    401: "UNAUTHENTICATED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    409: "ALREADY_EXISTS",
    429: "RESOURCE_EXHAUSTED",
    500: "INTERNAL",
    503: "UNAVAILABLE",
}


def _load_error_body(body: bytes | str | dict | None) -> str | dict | None:
    """Decode bytes and parse JSON object bodies; other text is returned as is."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str) and body.lstrip().startswith("{"):
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return body
    return body


class FirestoreAPIException(FirestoreServerException):
    """Error returned by the Firestore REST API, mapped from the HTTP status.

    The transport layer raises this after receiving a non-2xx response.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        path: str | None = None,
    ) -> None:
        """Initialize with HTTP status, message and optional resource path.

        Args:
            status_code: HTTP status code of the response.
            message: Error message from the response body.
            path: Resource path the request targeted, if known.
        """
        code = _STATUS_CODES.get(status_code, "UNKNOWN")
        details: dict[str, Any] = {"status_code": status_code}
        if path:
            details["path"] = path
        self.status_code = status_code
        super().__init__(message, code, details)

    @classmethod
    def from_http_response(
        cls,
        status_code: int,
        body: bytes | str | dict | None,
        path: str | None = None,
    ) -> "FirestoreAPIException":
        """Build from a response status and body.

        Uses error.message from the Google error envelope when present,
        otherwise the raw body text.
        """
        body = _load_error_body(body)
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = str(error["message"])
            else:
                message = str(body)
        elif body:
            message = body
        else:
            message = "No response body"
        if status_code == 404:
            message = f"Document not found: {path or 'unknown'}"
        elif status_code == 409:
            message = f"Document already exists: {path or 'unknown'}"
        return cls(status_code, message, path)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_already_exists(self) -> bool:
        return self.status_code == 409
