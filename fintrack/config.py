"""
Settings for the finance tracker data layer.

Values come from the process environment, then ``.env``, then the
defaults below.  The composition root builds one :class:`AppConfig` and
injects it; :func:`get_config` exists for code that runs before wiring
(the logger).
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_log = logging.getLogger("fintrack.config")


class AppConfig(BaseSettings):
    """Environment-backed settings.  Field names match the env variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )

    # Supabase project
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")

    # Entity cache lifetime in seconds
    CACHE_DEFAULT_TTL_S: float = Field(default=300.0, gt=0)

    # Rows re-read after a transaction write, and notification page size
    TRANSACTIONS_REFETCH_LIMIT: int = Field(default=20, ge=1)
    NOTIFICATIONS_FETCH_LIMIT: int = Field(default=50, ge=1)

    # Rotating JSON log
    LOG_FILE: str = "fintrack.log"
    LOG_MAX_BYTES: int = Field(default=5 * 1024 * 1024, gt=0)
    LOG_BACKUP_COUNT: int = Field(default=3, ge=0)

    @field_validator("SUPABASE_URL")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @model_validator(mode="after")
    def _warn_missing_env(self) -> AppConfig:
        """Running without credentials is allowed; every remote call then
        fails per request.  Say so once at start-up."""
        if not Path(".env").exists():
            _log.warning("No .env file; using environment variables and defaults.")
        if not self.SUPABASE_URL:
            _log.warning("SUPABASE_URL is not set; the data layer is offline.")
        return self


_config: Optional[AppConfig] = None
_config_lock = threading.Lock()


def get_config() -> AppConfig:
    """Process-wide ``AppConfig``, built on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = AppConfig()
    return _config
