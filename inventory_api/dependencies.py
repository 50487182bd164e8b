"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from supabase import create_client

from inventory_api.auth import (
    IdentityProvider,
    InMemoryIdentityProvider,
    SupabaseIdentityProvider,
    create_identity_client,
)
from inventory_api.config import DEFAULT_R2_PUBLIC_URL, get_settings
from inventory_api.db import DbClient, InMemoryDbClient, SqlDbClient, SupabaseDbClient
from inventory_api.storage import InMemoryStorageClient, R2StorageClient, StorageClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_identity_provider: IdentityProvider | None = None
_storage_client: StorageClient | None = None


def get_db_client() -> DbClient:
    """
    Return the process-wide catalog client.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    elif settings.supabase_configured:
        _db_client = SupabaseDbClient(
            create_client(settings.supabase_url, settings.supabase_key)
        )
    elif settings.database_url:
        _db_client = SqlDbClient(settings.database_url)
    else:
        logger.warning("No database configured; using in-memory catalog")
        _db_client = InMemoryDbClient()
    return _db_client


def get_identity_provider() -> IdentityProvider:
    global _identity_provider
    if _identity_provider:
        return _identity_provider

    settings = get_settings()
    if not settings.use_in_memory_backends and settings.supabase_configured:
        _identity_provider = SupabaseIdentityProvider(
            create_identity_client(settings.supabase_url, settings.supabase_key)
        )
    else:
        if not settings.use_in_memory_backends:
            logger.warning("Supabase not configured; using in-memory identity provider")
        _identity_provider = InMemoryIdentityProvider()
    return _identity_provider


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if not settings.use_in_memory_backends and settings.r2_configured:
        if settings.r2_public_url == DEFAULT_R2_PUBLIC_URL:
            logger.warning(
                "R2_PUBLIC_URL not set; public URLs will point at %s",
                DEFAULT_R2_PUBLIC_URL,
            )
        _storage_client = R2StorageClient(
            account_id=settings.r2_account_id,
            access_key_id=settings.r2_access_key,
            secret_access_key=settings.r2_secret_access_key,
            bucket=settings.r2_bucket,
            public_base_url=settings.r2_public_url,
        )
    else:
        if not settings.use_in_memory_backends:
            logger.warning("R2 not configured; using in-memory storage")
        _storage_client = InMemoryStorageClient(base_url=settings.r2_public_url)
    return _storage_client


def init_clients() -> None:
    """Build every delegate up front so the first request does not pay for it."""
    db = get_db_client()
    identity = get_identity_provider()
    storage = get_storage_client()
    logger.info(
        "Delegates ready: db=%s identity=%s storage=%s",
        type(db).__name__,
        type(identity).__name__,
        type(storage).__name__,
    )


def reset_clients() -> None:
    """Drop the cached delegates (used by tests)."""
    global _db_client, _identity_provider, _storage_client
    _db_client = None
    _identity_provider = None
    _storage_client = None
