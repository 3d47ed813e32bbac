from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from s3fetch.api.v1.deps import get_fetch_service
from s3fetch.services.fetch_service import FetchService

router = APIRouter()


@router.get("/object", response_class=PlainTextResponse)
async def get_object(service: FetchService = Depends(get_fetch_service)) -> str:
    """Return the configured object's content as plain text.

    Fetch failures surface as ``FetchError`` and are rendered by the
    application's problem+json handler.
    """
    return await service.fetch_object()
