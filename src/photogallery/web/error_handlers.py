import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from photogallery.core.modules.ratelimit.models import RateLimitResult
from photogallery.errors import (
    AccessDeniedError,
    AuthenticationError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes.

    Requests already counted by a rate limiter keep their X-RateLimit-* headers.
    """
    if isinstance(exc, RateLimitExceededError):
        return create_json_error_response(
            status_code=429, message=str(exc), error_type="rate_limited", headers=exc.result.headers()
        )
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    limit: RateLimitResult | None = getattr(request.state, "rate_limit", None)
    headers = limit.headers() if limit is not None else None
    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, headers=headers)


async def identity_provider_error_handler(_: Request, exc: Exception) -> Response:
    """Handle failed OAuth handshakes (502) without exposing provider details."""
    logger.warning("Identity provider error: %s", exc)
    return create_json_error_response(status_code=502, message="Authentication failed", error_type="identity_provider_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )
