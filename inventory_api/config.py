"""
Configuration and settings for the inventory API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_R2_PUBLIC_URL = "https://example.test/storage"


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Hosted database + identity provider (Supabase)
    supabase_url: Optional[str] = Field(default=None)
    supabase_key: Optional[str] = Field(default=None)

    # Plain SQLAlchemy URL, used when Supabase is not configured
    database_url: Optional[str] = Field(default=None)

    # Cloudflare R2 (S3-compatible) storage
    r2_account_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("R2ACCOUNTID", "R2_ACCOUNT_ID", "r2_account_id"),
    )
    r2_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("R2ACCESSKEY", "R2_ACCESS_KEY", "r2_access_key"),
    )
    r2_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "R2SECRETACCESSKEY", "R2_SECRET_ACCESS_KEY", "r2_secret_access_key"
        ),
    )
    r2_bucket: Optional[str] = Field(default=None)
    r2_public_url: str = Field(default=DEFAULT_R2_PUBLIC_URL)
    upload_url_expires_in: int = Field(default=900, ge=1)

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3333)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "INVENTORY_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def r2_configured(self) -> bool:
        return bool(
            self.r2_account_id
            and self.r2_access_key
            and self.r2_secret_access_key
            and self.r2_bucket
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
