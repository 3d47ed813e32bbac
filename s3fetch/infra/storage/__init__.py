"""Object storage abstraction layer.

This module provides a protocol-based abstraction for object storage backends,
enabling support for S3, MinIO, and other S3-compatible services.
"""

from .client import (
    ObjectBody,
    StorageClient,
    StorageError,
    StoredObject,
)

__all__ = [
    "ObjectBody",
    "StorageClient",
    "StorageError",
    "StoredObject",
]
