"""
Configuration and settings for the CMS backend.
"""

from __future__ import annotations

import json
import secrets
from functools import lru_cache
from typing import Annotated, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from content.defaults import DEFAULT_ADMIN_EMAILS

BackendName = Literal["auto", "memory", "file", "blob", "firebase"]


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")
    environment: Literal["development", "production"] = Field(
        default="development", validation_alias="CMS_ENV"
    )
    log_level: str = Field(default="INFO")

    # Local JSON documents and uploads
    data_dir: str = Field(default="data", validation_alias="CMS_DATA_DIR")

    # Backend selection
    document_backend: BackendName = Field(
        default="auto", validation_alias="CMS_DOCUMENT_BACKEND"
    )
    asset_backend: BackendName = Field(
        default="auto", validation_alias="CMS_ASSET_BACKEND"
    )
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="CMS_USE_IN_MEMORY_BACKENDS"
    )

    # Vercel Blob
    blob_read_write_token: Optional[str] = Field(default=None)
    blob_api_url: str = Field(default="https://blob.vercel-storage.com")

    # Database (Postgres expected). None means "production with DATABASE_URL".
    database_url: Optional[str] = Field(default=None)
    use_database: Optional[bool] = Field(
        default=None, validation_alias="CMS_USE_DATABASE"
    )

    # Firebase Admin
    firebase_service_account_key: Optional[str] = Field(default=None)
    firebase_storage_bucket: Optional[str] = Field(default=None)

    # Admin sessions
    session_secret: str = Field(
        default_factory=lambda: secrets.token_hex(32),
        validation_alias="CMS_SESSION_SECRET",
    )
    session_ttl_minutes: int = Field(
        default=720, validation_alias="CMS_SESSION_TTL_MINUTES"
    )
    # Comma separated, or a JSON array.
    fallback_admin_emails: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_ADMIN_EMAILS),
        validation_alias="CMS_FALLBACK_ADMIN_EMAILS",
    )

    # Contact form mail
    resend_api_key: Optional[str] = Field(default=None)
    contact_recipient: str = Field(
        default="technical.secretary@iitgn.ac.in",
        validation_alias="CMS_CONTACT_RECIPIENT",
    )
    contact_sender: str = Field(
        default="contact@iitgn.tech", validation_alias="CMS_CONTACT_SENDER"
    )

    @field_validator("fallback_admin_emails", mode="before")
    @classmethod
    def _split_emails(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [email.strip() for email in value.split(",") if email.strip()]
        return value

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def database_enabled(self) -> bool:
        # In-memory mode has an in-memory database, but only when asked for.
        if not self.database_url:
            return bool(self.use_in_memory_backends and self.use_database)
        if self.use_database is not None:
            return self.use_database
        return self.environment == "production"

    @property
    def firebase_configured(self) -> bool:
        key = self.firebase_service_account_key
        if not key or "placeholder" in key:
            return False
        return bool(self.firebase_storage_bucket)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
