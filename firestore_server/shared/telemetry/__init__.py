"""Shared telemetry: logging setup."""

from firestore_server.shared.telemetry.logging import setup_logging

__all__ = [
    "setup_logging",
]
