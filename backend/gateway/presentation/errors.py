"""JSON error rendering and FastAPI exception handlers.

Every error leaves the gateway as ``{"error": "<human readable>"}``.
Provider details, stack traces and internal identifiers are logged only.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.application.schemas import ErrorResponse
from gateway.domain.exceptions import (
    GatewayError,
    MethodNotAllowedError,
    NotFoundError,
    RateLimitedError,
    UpstreamServiceError,
)

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def error_response(
    error: GatewayError, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Render a GatewayError as its JSON response."""
    body = ErrorResponse(error=error.message)
    extra = dict(headers or {})
    if isinstance(error, RateLimitedError):
        body.retry_after_sec = error.retry_after
        extra["Retry-After"] = str(error.retry_after)
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=extra,
        media_type=JSON_MEDIA_TYPE,
    )


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if isinstance(exc, UpstreamServiceError):
        logger.error(
            "Upstream failure on %s %s: provider=%s status=%s detail=%s",
            request.method,
            request.url.path,
            exc.provider,
            exc.upstream_status,
            exc.detail[:500],
        )
    return error_response(exc)


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(NotFoundError())
    if exc.status_code == 405:
        return error_response(MethodNotAllowedError())
    return error_response(GatewayError(str(exc.detail), status_code=exc.status_code))


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    invalid_json = any(
        err.get("type") == "json_invalid"
        or (err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",))
        for err in exc.errors()
    )
    message = "Invalid JSON" if invalid_json else "Invalid request body"
    return error_response(GatewayError(message, status_code=400))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, _gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
