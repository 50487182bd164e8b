"""
Storage abstraction for Cloudflare R2 (S3-compatible) and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from inventory_api.errors import DelegateError

UPLOADS_PREFIX = "uploads"


def upload_key(filename: str) -> str:
    """Storage key for a client upload; the filename is used verbatim."""
    return f"{UPLOADS_PREFIX}/{filename}"


def join_public_url(base_url: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{key}"


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def presign_put(self, key: str, content_type: str, expires_in: int = 900) -> str:
        ...

    def public_url(self, key: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    presigned: list = field(default_factory=list)

    def presign_put(self, key: str, content_type: str, expires_in: int = 900) -> str:
        self.presigned.append((key, content_type, expires_in))
        return (
            f"{self.base_url}/{quote(key)}?op=put"
            f"&content-type={quote(content_type, safe='')}&expires={expires_in}"
        )

    def public_url(self, key: str) -> str:
        return join_public_url(self.base_url, key)


@dataclass
class R2StorageClient:
    """
    S3-compatible storage client for Cloudflare R2.
    """

    account_id: str
    access_key_id: str
    secret_access_key: str
    bucket: str
    public_base_url: str

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=f"https://{self.account_id}.r2.cloudflarestorage.com",
            # R2 ignores regions but SigV4 needs one.
            region_name="auto",
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def presign_put(self, key: str, content_type: str, expires_in: int = 900) -> str:
        try:
            return self._client.generate_presigned_url(
                ClientMethod="put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise DelegateError(str(exc)) from exc

    def public_url(self, key: str) -> str:
        return join_public_url(self.public_base_url, key)
