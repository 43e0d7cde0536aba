"""Library configuration (settings and environment).

Single source of truth for configuration. Uses pydantic-settings
with .env support. Settings are validated on first access, not at
import time.
"""

import re
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from firestore_server.core.constants import DEFAULT_DATABASE_ID, FIRESTORE_BASE_URL

_EMULATOR_HOST_RE = re.compile(r"^[A-Za-z0-9.\-]+:\d{1,5}$")


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    All settings are optional with defaults. The project ID is only
    required when a client facade is initialized (see init_firestore).
    """

    # App
    app_name: str = "firestore-server"
    debug: bool = False

    # Firestore database
    firestore_project_id: str | None = None
    firestore_database_id: str = DEFAULT_DATABASE_ID
    firestore_base_url: str = FIRESTORE_BASE_URL
    # host:port of a local emulator; takes precedence over firestore_base_url.
    firestore_emulator_host: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database(self) -> "Settings":
        """Validate database ID and emulator host format."""
        if not self.firestore_database_id:
            raise ValueError(
                "FIRESTORE_DATABASE_ID must not be empty; use '(default)' for the default database."
            )
        if self.firestore_emulator_host and not _EMULATOR_HOST_RE.match(
            self.firestore_emulator_host
        ):
            raise ValueError(
                f"FIRESTORE_EMULATOR_HOST must be 'host:port', got: {self.firestore_emulator_host!r}"
            )
        return self

    @property
    def rest_base_url(self) -> str:
        """Base URL for REST resource names (emulator when configured)."""
        if self.firestore_emulator_host:
            return f"http://{self.firestore_emulator_host}/v1"
        return self.firestore_base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars
    so the next get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
