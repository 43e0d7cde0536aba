"""Shared utilities: UTC datetime handling and RFC 3339 timestamps."""

from firestore_server.shared.utils.datetime import (
    ensure_utc,
    format_timestamp,
    parse_timestamp,
)

__all__ = [
    "ensure_utc",
    "format_timestamp",
    "parse_timestamp",
]
