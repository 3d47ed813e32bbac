"""S3-compatible storage client implementation.

This module provides an S3-compatible storage client that works with
AWS S3, MinIO, and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from botocore.exceptions import ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from s3fetch.infra.storage.client import StorageError, StoredObject

if TYPE_CHECKING:
    from s3fetch.common.config import StorageSettings

NETWORKING_ERROR = "NetworkingError"


class S3ObjectBody:
    """Adapter exposing a botocore ``StreamingBody`` as an ``ObjectBody``."""

    def __init__(self, stream: Any) -> None:
        self._stream = stream

    def read_text(self, encoding: str = "utf-8") -> str:
        try:
            return self._stream.read().decode(encoding)
        finally:
            self._stream.close()


def provider_error_code(exc: BaseException) -> str:
    """Return the provider's identifier for a failed boto3 call."""
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code")
        if code:
            return str(code)
    if isinstance(exc, (BotoConnectionError, HTTPClientError)):
        return NETWORKING_ERROR
    return type(exc).__name__


class S3StorageClient:
    """S3-compatible object storage client.

    Supports AWS S3, MinIO, and other S3-compatible services.
    Uses boto3 for all storage operations; credentials are resolved by
    boto3's default provider chain.
    """

    def __init__(self, *, settings: "StorageSettings") -> None:
        """Initialize the S3 client bound to the configured region.

        Args:
            settings: Storage section of the application settings.
        """
        self._settings = settings
        self._client = self._build_client(settings)

    @staticmethod
    def _build_client(settings: "StorageSettings") -> Any:
        """Create a boto3 S3 client from settings."""
        import boto3

        return boto3.client(
            "s3",
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
        )

    def get_object(self, *, bucket: str, object_key: str) -> StoredObject:
        """Issue a single GET object request."""
        try:
            response = self._client.get_object(Bucket=bucket, Key=object_key)
        except Exception as exc:
            raise StorageError(
                f"Failed to get object: {exc}", code=provider_error_code(exc)
            ) from exc

        stream = response.get("Body")
        size = response.get("ContentLength")
        return StoredObject(
            body=S3ObjectBody(stream) if stream is not None else None,
            content_type=response.get("ContentType"),
            content_length=int(size) if size is not None else None,
        )
