"""
Password sign-in against the identity provider.
"""

from __future__ import annotations

import secrets
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Protocol

from supabase import AuthApiError, Client, create_client
from supabase.client import ClientOptions

from inventory_api.errors import CredentialsRejected

INVALID_CREDENTIALS = "Invalid login credentials"


class IdentityProvider(Protocol):
    """Exchanges an email/password pair for the provider's user + session."""

    def sign_in_with_password(self, email: str, password: str) -> dict:
        ...


@dataclass
class InMemoryIdentityProvider:
    """Test double that issues opaque tokens for registered users."""

    session_ttl: int = 3600
    users: Dict[str, dict] = field(default_factory=dict)

    def register(self, email: str, password: str) -> dict:
        user = {"id": uuid.uuid4().hex, "email": email, "role": "authenticated"}
        self.users[email] = {"password": password, "user": user}
        return user

    def sign_in_with_password(self, email: str, password: str) -> dict:
        entry = self.users.get(email)
        if not entry or not secrets.compare_digest(entry["password"], password):
            raise CredentialsRejected(INVALID_CREDENTIALS, code="invalid_credentials")
        now = int(time.time())
        session = {
            "access_token": secrets.token_urlsafe(32),
            "refresh_token": secrets.token_urlsafe(16),
            "token_type": "bearer",
            "expires_in": self.session_ttl,
            "expires_at": now + self.session_ttl,
            "user": dict(entry["user"]),
        }
        return {"user": dict(entry["user"]), "session": session}


def create_identity_client(url: str, key: str) -> Client:
    """Client used only for sign-ins; it never refreshes the sessions it issues."""
    return create_client(
        url,
        key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


class SupabaseIdentityProvider:
    """
    Supabase Auth password sign-in.

    Owns its own client: a successful sign-in stores the session on the
    client it was made with, so it must not share one with catalog queries,
    and the session is dropped again once the response has been copied.
    """

    def __init__(self, client: Client):
        self._client = client

    def sign_in_with_password(self, email: str, password: str) -> dict:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            raise CredentialsRejected(
                exc.message or INVALID_CREDENTIALS, code=getattr(exc, "code", None)
            ) from exc
        finally:
            # Local only: signing out would revoke the refresh token just issued.
            self._client.auth._remove_session()
        return {
            "user": response.user.model_dump(mode="json") if response.user else None,
            "session": (
                response.session.model_dump(mode="json") if response.session else None
            ),
        }
