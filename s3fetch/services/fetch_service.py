"""Single-object fetch with provider error classification."""

from __future__ import annotations

import asyncio
import logging

from s3fetch.common.config import Settings
from s3fetch.infra.observability.metrics import FETCHES
from s3fetch.infra.storage.client import StorageClient, StorageError
from s3fetch.services.errors import (
    FetchError,
    ObjectNotFoundError,
    StorageAuthenticationError,
    StorageInternalError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "File or bucket not found"
UNAVAILABLE_MESSAGE = "S3 service is unavailable"
ACCESS_DENIED_MESSAGE = "Access denied"
UNEXPECTED_MESSAGE = "Unexpected error occurred"
NO_BODY_MESSAGE = "No response body received"

# Provider identifiers are matched exactly, case-sensitive
_ERROR_BY_CODE: dict[str, tuple[type[FetchError], str]] = {
    "NoSuchKey": (ObjectNotFoundError, NOT_FOUND_MESSAGE),
    "NoSuchBucket": (ObjectNotFoundError, NOT_FOUND_MESSAGE),
    "NetworkingError": (StorageUnavailableError, UNAVAILABLE_MESSAGE),
    "ServiceUnavailable": (StorageUnavailableError, UNAVAILABLE_MESSAGE),
    "AccessDenied": (StorageAuthenticationError, ACCESS_DENIED_MESSAGE),
    "Forbidden": (StorageAuthenticationError, ACCESS_DENIED_MESSAGE),
}


def classify_provider_error(code: str | None) -> FetchError:
    """Map a provider error identifier to a domain error.

    Unknown or missing identifiers map to :class:`StorageInternalError`.
    """
    error_cls, message = _ERROR_BY_CODE.get(
        code or "", (StorageInternalError, UNEXPECTED_MESSAGE)
    )
    return error_cls(message)


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, StorageError) and exc.code:
        return exc.code
    return type(exc).__name__


class FetchService:
    """Reads the configured object and returns it as text.

    Holds no mutable state beyond the storage client handle, so one instance
    may serve concurrent calls.
    """

    def __init__(
        self, settings: Settings, *, client: StorageClient | None = None
    ) -> None:
        self._bucket = settings.storage.bucket_name
        self._object_key = settings.storage.object_key
        if client is None:
            from s3fetch.infra.storage.s3_client import S3StorageClient

            client = S3StorageClient(settings=settings.storage)
        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def object_key(self) -> str:
        return self._object_key

    async def fetch_object(self) -> str:
        """Fetch the object once and return its content.

        Raises:
            FetchError: One of the four classified kinds; never retried.
        """
        try:
            content = await self._fetch()
        except FetchError as exc:
            FETCHES.labels(exc.kind.value).inc()
            raise
        FETCHES.labels("success").inc()
        return content

    async def _fetch(self) -> str:
        try:
            stored = await asyncio.to_thread(
                self._client.get_object,
                bucket=self._bucket,
                object_key=self._object_key,
            )
        except FetchError:
            raise
        except Exception as exc:
            code = _error_code(exc)
            logger.error(
                "storage_error code=%s message=%s bucket=%s key=%s",
                code,
                exc,
                self._bucket,
                self._object_key,
                extra={
                    "extra": {
                        "code": code,
                        "error": str(exc),
                        "bucket": self._bucket,
                        "key": self._object_key,
                    }
                },
            )
            raise classify_provider_error(code) from exc

        if stored.body is None:
            logger.error(
                "storage_error code=NoBody message=%s bucket=%s key=%s",
                NO_BODY_MESSAGE,
                self._bucket,
                self._object_key,
                extra={
                    "extra": {
                        "code": "NoBody",
                        "error": NO_BODY_MESSAGE,
                        "bucket": self._bucket,
                        "key": self._object_key,
                    }
                },
            )
            raise StorageInternalError(NO_BODY_MESSAGE)

        try:
            return await asyncio.to_thread(stored.body.read_text)
        except FetchError:
            raise
        except Exception as exc:
            logger.error(
                "body_read_error error=%r bucket=%s key=%s",
                exc,
                self._bucket,
                self._object_key,
                extra={
                    "extra": {
                        "error": repr(exc),
                        "bucket": self._bucket,
                        "key": self._object_key,
                    }
                },
            )
            raise StorageInternalError(UNEXPECTED_MESSAGE) from exc
