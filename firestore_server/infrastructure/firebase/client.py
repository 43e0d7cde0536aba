"""Firestore client facade (references, URLs and schema registry; no network).

Initialized at startup from settings: FIRESTORE_PROJECT_ID and
FIRESTORE_DATABASE_ID, with FIRESTORE_EMULATOR_HOST taking precedence over
FIRESTORE_BASE_URL when set. A transport uses url_for() together with the
bodies from _rest_encoding to talk to the REST API.
"""

import logging

from firestore_server.application.services.schema_registry import SchemaRegistry
from firestore_server.core.config import get_settings
from firestore_server.core.constants import DEFAULT_DATABASE_ID, FIRESTORE_BASE_URL
from firestore_server.domain.exceptions import FirestoreServerException
from firestore_server.domain.value_objects.paths import (
    CollectionPath,
    DatabasePath,
    DocumentPath,
)
from firestore_server.domain.value_objects.references import (
    CollectionReference,
    DocumentReference,
)

logger = logging.getLogger(__name__)

_firestore_client: "FirestoreClient | None" = None


class FirestoreClient:
    """Entry point for building references bound to one database."""

    def __init__(self, database: DatabasePath, base_url: str = FIRESTORE_BASE_URL) -> None:
        self.database = database
        self.base_url = base_url.rstrip("/")
        self._registry: SchemaRegistry | None = None

    @classmethod
    def emulator(
        cls,
        project_id: str,
        host: str = "localhost",
        port: int = 8080,
        database_id: str = DEFAULT_DATABASE_ID,
    ) -> "FirestoreClient":
        """Client pointed at a local Firestore emulator."""
        return cls(DatabasePath(project_id, database_id), f"http://{host}:{port}/v1")

    @property
    def registry(self) -> SchemaRegistry:
        """Schema registry for this database, created on first use."""
        if self._registry is None:
            self._registry = SchemaRegistry(self.database)
        return self._registry

    def collection(self, path: str) -> CollectionReference:
        """Reference for a collection path, e.g. 'users' or 'users/alice/posts'."""
        return CollectionReference(self.database, CollectionPath.parse(path))

    def document(self, path: str) -> DocumentReference:
        """Reference for a document path, e.g. 'users/alice'."""
        return DocumentReference(self.database, DocumentPath.parse(path))

    def url_for(self, resource_name: str) -> str:
        """Absolute REST URL for a resource name (or name + ':method')."""
        return f"{self.base_url}/{resource_name.lstrip('/')}"


def init_firestore() -> bool:
    """Initialize the module-level client from settings.

    Safe to call when FIRESTORE_PROJECT_ID is not set (returns False).
    Idempotent if already initialized. Invalid settings are logged and
    reported as False so the host process can start without Firestore.

    Returns:
        True if the client was initialized, False if disabled or on error.
    """
    global _firestore_client
    if _firestore_client is not None:
        return True
    try:
        settings = get_settings()
        if not settings.firestore_project_id:
            logger.warning("FIRESTORE_PROJECT_ID not set; Firestore client disabled")
            return False
        database = DatabasePath(
            settings.firestore_project_id, settings.firestore_database_id
        )
        _firestore_client = FirestoreClient(database, settings.rest_base_url)
    except (ValueError, FirestoreServerException):
        logger.exception("Firestore initialization failed")
        return False
    logger.info(
        "Firestore client initialized for %s (%s)",
        _firestore_client.database,
        _firestore_client.base_url,
    )
    return True


def get_firestore_client() -> FirestoreClient | None:
    """Return the module-level client, or None if not initialized."""
    return _firestore_client


def reset_firestore() -> None:
    """Drop the module-level client. Call from shutdown or between tests."""
    global _firestore_client
    if _firestore_client is not None:
        _firestore_client = None
        logger.info("Firestore client reset")
