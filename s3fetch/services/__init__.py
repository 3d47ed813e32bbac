from .errors import (
    ErrorKind,
    FetchError,
    ObjectNotFoundError,
    ServiceError,
    StorageAuthenticationError,
    StorageInternalError,
    StorageUnavailableError,
)
from .fetch_service import FetchService, classify_provider_error

__all__ = [
    "ErrorKind",
    "FetchError",
    "FetchService",
    "ObjectNotFoundError",
    "ServiceError",
    "StorageAuthenticationError",
    "StorageInternalError",
    "StorageUnavailableError",
    "classify_provider_error",
]
