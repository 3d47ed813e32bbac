import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from s3fetch.api.v1.routers.objects import router as objects_router
from s3fetch.common.config import Settings, get_settings
from s3fetch.infra.observability.metrics import metrics_app
from s3fetch.infra.observability.middleware import MetricsMiddleware
from s3fetch.services.errors import ErrorKind, FetchError
from s3fetch.services.fetch_service import FetchService

ERROR_CODE_BY_STATUS = {
    400: "bad_request",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    500: "internal_error",
    503: "service_unavailable",
}

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.AUTHENTICATION_FAILED: 403,
    ErrorKind.INTERNAL: 500,
}


def _resolve_error_code(status_code: int) -> str:
    return ERROR_CODE_BY_STATUS.get(status_code, "unknown_error")


def _status_for_error(exc: FetchError) -> int:
    return STATUS_BY_KIND.get(exc.kind, 500)


def _problem_response(
    request: Request, *, status_code: int, title: str, detail: object
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        media_type="application/problem+json",
        content={
            "type": "about:blank",
            "title": title,
            "status": status_code,
            "detail": detail,
            "error_code": _resolve_error_code(status_code),
            "instance": str(request.url),
            "request_id": request.headers.get("X-Request-Id"),
        },
    )


def create_app(
    settings: Settings | None = None, *, fetch_service: FetchService | None = None
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="S3 Fetch Service",
        version="v1.0",
        description="Serves a single configured object from S3 as text",
    )

    app.state.settings = settings
    app.state.fetch_service = fetch_service or FetchService(settings)

    app.include_router(objects_router, prefix="/api/v1", tags=["objects"])

    # Metrics
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)
        app.mount("/metrics", metrics_app)

    @app.exception_handler(FetchError)
    async def fetch_error_handler(request: Request, exc: FetchError):
        status_code = _status_for_error(exc)
        logging.getLogger("http").log(
            logging.WARNING if status_code < 500 else logging.ERROR,
            "fetch_error kind=%s status=%s detail=%s method=%s path=%s",
            exc.kind.value,
            status_code,
            exc.message,
            request.method,
            request.url.path,
            extra={
                "extra": {
                    "kind": exc.kind.value,
                    "status": status_code,
                    "detail": exc.message,
                    "method": request.method,
                    "route": request.url.path,
                }
            },
        )
        return _problem_response(
            request, status_code=status_code, title="Fetch Error", detail=exc.message
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _problem_response(
            request,
            status_code=exc.status_code,
            title="HTTP Error",
            detail=exc.detail,
        )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
