"""Gateway guard middleware — CORS, origin allowlist and rate limiting.

Order for every request:
    1. OPTIONS  → preflight acknowledgement (no origin check, no rate limit)
    2. Origin   → 403 when present and not on the allowlist
    3. Limiter  → 429 with Retry-After when the client's window is exhausted
    4. Route    → the endpoint (or 404 / 405)
CORS headers reflecting the allowlist decision are added to every response.
"""

import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from gateway.application.services.rate_limiter import RateLimiter, client_key_from_headers
from gateway.domain.exceptions import (
    ForbiddenOriginError,
    GatewayError,
    RateLimitedError,
    UpstreamServiceError,
)
from gateway.presentation.errors import JSON_MEDIA_TYPE, error_response

logger = logging.getLogger(__name__)


def cors_headers(origin: str, allowlist: tuple[str, ...]) -> dict[str, str]:
    """CORS headers echoing the origin only when it is allowed."""
    return {
        "Access-Control-Allow-Origin": origin if origin and origin in allowlist else "null",
        "Vary": "Origin",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
        "Access-Control-Allow-Methods": "POST,OPTIONS",
    }


class GatewayGuardMiddleware(BaseHTTPMiddleware):
    """Applies the origin allowlist and the per-client rate limit before routing."""

    def __init__(self, app: ASGIApp, *, allowlist: tuple[str, ...], rate_limiter: RateLimiter):
        super().__init__(app)
        self._allowlist = allowlist
        self._rate_limiter = rate_limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin", "")
        cors = cors_headers(origin, self._allowlist)

        if request.method == "OPTIONS":
            return JSONResponse({"ok": True}, headers=cors, media_type=JSON_MEDIA_TYPE)

        # Non-browser clients send no Origin and are not subject to the allowlist.
        if origin and origin not in self._allowlist:
            logger.info("Blocked origin %s on %s %s", origin, request.method, request.url.path)
            return error_response(ForbiddenOriginError(origin), headers=cors)

        client_key = client_key_from_headers(request.headers)
        try:
            decision = await self._rate_limiter.check(client_key)
        except UpstreamServiceError as exc:
            logger.error("Rate limiter unavailable: %s", exc)
            return error_response(exc, headers=cors)
        if not decision.allowed:
            return error_response(RateLimitedError(decision.retry_after), headers=cors)

        try:
            response = await call_next(request)
        except GatewayError as exc:
            return error_response(exc, headers=cors)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(GatewayError("Internal error", status_code=500), headers=cors)

        response.headers.update(cors)
        return response
