from __future__ import annotations

from fastapi import Request

from s3fetch.services.fetch_service import FetchService


def get_fetch_service(request: Request) -> FetchService:
    return request.app.state.fetch_service
