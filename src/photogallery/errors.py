from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photogallery.core.modules.ratelimit.models import RateLimitResult


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when the session is missing, malformed, expired or forged.

    The message is always the same so callers cannot tell which check failed.
    """

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class AccessDeniedError(UserError):
    """Raised when an authenticated identity is not allowed to perform an action."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class RateLimitExceededError(UserError):
    """Raised when a client exceeds the request budget for an endpoint."""

    def __init__(self, result: RateLimitResult) -> None:
        super().__init__("Rate limit exceeded. Please try again later.")
        self.result = result


class IdentityProviderError(Exception):
    """Raised when the OAuth identity provider handshake fails."""
