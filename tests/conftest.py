"""Pytest configuration and shared fixtures for firestore_server.

Settings are read from the environment through get_settings(), which is
cached; fixtures that change env vars clear the cache before and after.
"""

import pytest

from firestore_server.application.services import FirestoreDecoder, FirestoreEncoder
from firestore_server.core.config import get_settings
from firestore_server.domain.value_objects import DatabasePath
from firestore_server.infrastructure.firebase import reset_firestore

_FIRESTORE_ENV_VARS = (
    "FIRESTORE_PROJECT_ID",
    "FIRESTORE_DATABASE_ID",
    "FIRESTORE_BASE_URL",
    "FIRESTORE_EMULATOR_HOST",
    "DEBUG",
)


@pytest.fixture
def encoder() -> FirestoreEncoder:
    return FirestoreEncoder()


@pytest.fixture
def decoder() -> FirestoreDecoder:
    return FirestoreDecoder()


@pytest.fixture
def database() -> DatabasePath:
    """Default database of the 'demo-project' project."""
    return DatabasePath("demo-project")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Unset Firestore env vars, ignore any local .env and reset cached settings/client."""
    for name in _FIRESTORE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    reset_firestore()
    yield monkeypatch
    get_settings.cache_clear()
    reset_firestore()
