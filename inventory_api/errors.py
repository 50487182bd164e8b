"""
Error types shared by the delegates and the HTTP layer.

Delegates raise ``DelegateError`` when the remote service answered but
reported a failure. Route handlers wrap every delegate call in
``delegate_call`` which turns both that and any unexpected exception into
an ``ApiError`` carrying the response envelope.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional


class DelegateError(Exception):
    """A remote service (database, identity provider, storage) reported a failure."""

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class CredentialsRejected(DelegateError):
    """The identity provider refused the supplied email/password."""


class ApiError(Exception):
    """Failure rendered as ``{"error": ..., "details": ...}``."""

    def __init__(
        self, status_code: int, error: str, details: Optional[str] = None
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_response(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


@contextmanager
def delegate_call(
    failure: str, internal: str, *, delegate_status: int = 500
) -> Iterator[None]:
    """Map errors raised inside the block onto ``ApiError``.

    ``failure`` is used when the delegate reported an error, ``internal``
    for anything else that blew up.
    """
    try:
        yield
    except ApiError:
        raise
    except DelegateError as exc:
        raise ApiError(delegate_status, failure, exc.message) from exc
    except Exception as exc:
        raise ApiError(500, internal, str(exc) or None) from exc
