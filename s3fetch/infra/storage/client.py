"""Storage client protocol and data types.

This module defines the abstract interface the fetch service reads objects
through, so the S3 implementation can be swapped for an in-memory fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class StorageError(RuntimeError):
    """Raised when object storage operations fail.

    ``code`` carries the provider's error identifier (``NoSuchKey``,
    ``AccessDenied``, ``NetworkingError``...). It is what callers classify on;
    the message is for humans only.
    """

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class ObjectBody(Protocol):
    """Readable payload of a fetched object."""

    def read_text(self, encoding: str = "utf-8") -> str:
        """Consume the whole payload and decode it.

        Raises:
            Exception: Any read or decode failure, left to the caller to
                classify.
        """
        ...


@dataclass(frozen=True, slots=True)
class StoredObject:
    """Result of a GET object request."""

    body: ObjectBody | None
    content_type: str | None = None
    content_length: int | None = None


class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Currently supports S3-compatible storage services.
    """

    def get_object(self, *, bucket: str, object_key: str) -> StoredObject:
        """Issue a single GET request for an object.

        Args:
            bucket: Source bucket name.
            object_key: Object key (path) in the bucket.

        Returns:
            StoredObject whose body may be missing.

        Raises:
            StorageError: If the request fails.
        """
        ...
