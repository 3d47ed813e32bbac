from __future__ import annotations

from enum import Enum


class ServiceError(Exception):
    """Base class for application service level exceptions."""


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    SERVICE_UNAVAILABLE = "service_unavailable"
    AUTHENTICATION_FAILED = "authentication_failed"
    INTERNAL = "internal"


class FetchError(ServiceError):
    """A classified failure of an object fetch.

    Subclasses pin ``kind``; callers match on it instead of on the
    provider's error vocabulary.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ObjectNotFoundError(FetchError):
    """Raised when the bucket or the object key does not exist."""

    kind = ErrorKind.NOT_FOUND


class StorageUnavailableError(FetchError):
    """Raised when the storage service cannot be reached or is unavailable."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class StorageAuthenticationError(FetchError):
    """Raised when the storage service denies access."""

    kind = ErrorKind.AUTHENTICATION_FAILED


class StorageInternalError(FetchError):
    """Raised for any failure that fits no other kind."""

    kind = ErrorKind.INTERNAL
