"""
Client configuration using Pydantic settings.

Configuration is loaded from environment variables (or a `.env` file)
with sensible defaults. Explicit constructor arguments always win over
settings, so the library works without any environment at all.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """
    Storage client settings loaded from environment variables.

    All settings can be overridden via environment variables, e.g.
    STORAGE_URL=https://local.storage.nhost.run/v1
    """

    storage_url: str = Field(
        default="",
        description="Base URL of the storage service, without a trailing path segment."
    )
    storage_app_id: Optional[str] = Field(
        default=None,
        description="Tenant namespace. When set, requests go to {url}/custom/storage/{app_id}."
    )
    storage_timeout_seconds: float = Field(
        default=10.0,
        description="Connect/response timeout applied to every request."
    )
    storage_header_prefix: str = Field(
        default="x-nhost",
        description="Prefix for the bucket/file id/file name upload headers."
    )
    storage_access_token: Optional[str] = Field(
        default=None,
        description="Bearer token attached to requests. Usually set at runtime instead."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("storage_timeout_seconds")
    @classmethod
    def _timeout_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("storage_timeout_seconds must be positive")
        return value

    @field_validator("storage_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def validate_required_fields(self) -> list[str]:
        """Return the env var names that must be set but aren't."""
        missing = []
        if not self.storage_url:
            missing.append("STORAGE_URL")
        return missing


@lru_cache()
def get_settings() -> StorageSettings:
    """
    Get cached settings instance.

    Settings are read once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return StorageSettings()
