"""Domain-specific exceptions — framework-independent.

Every gateway error carries the HTTP status it surfaces as and a
human-readable message that is safe to return to the caller.
"""


class GatewayError(Exception):
    """Base class for errors that surface as a JSON ``{"error": ...}`` response."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ClientError(GatewayError):
    """Malformed request — invalid JSON, empty message, no docs."""

    status_code = 400


class AuthError(GatewayError):
    """Missing or invalid admin bearer token."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenOriginError(GatewayError):
    """Request declared an Origin that is not on the allowlist."""

    status_code = 403

    def __init__(self, origin: str, message: str = "CORS blocked"):
        self.origin = origin
        super().__init__(message)


class RateLimitedError(GatewayError):
    """Client exceeded its request budget for the current window."""

    status_code = 429

    def __init__(self, retry_after: int, message: str = "Rate limited"):
        self.retry_after = retry_after
        super().__init__(message)


class NotFoundError(GatewayError):
    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class MethodNotAllowedError(GatewayError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class UpstreamServiceError(GatewayError):
    """Raised when an external collaborator (model, index, blob store) fails.

    Provider-agnostic — works for OpenRouter, pgvector, the blob store, etc.
    The provider detail is kept for logging and never returned to callers.
    """

    status_code = 502

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.upstream_status = status_code
        self.detail = message
        super().__init__(f"[{provider}] {status_code}: {message}")
        self.message = "Upstream service unavailable"
