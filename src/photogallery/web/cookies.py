"""Session and OAuth state cookies."""

from fastapi import Response

from photogallery.core.modules.session.models import SESSION_COOKIE_NAME, SESSION_TTL_SECONDS

OAUTH_STATE_COOKIE_NAME = "oauth_state"
OAUTH_STATE_MAX_AGE = 10 * 60


def set_session_cookie(response: Response, token: str, secure: bool) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=SESSION_TTL_SECONDS,
    )


def clear_session_cookie(response: Response, secure: bool) -> None:
    """Reissue the session cookie with Max-Age=0 so the browser drops it."""
    response.set_cookie(key=SESSION_COOKIE_NAME, value="", path="/", httponly=True, secure=secure, samesite="lax", max_age=0)


def set_oauth_state_cookie(response: Response, state: str, secure: bool) -> None:
    response.set_cookie(
        key=OAUTH_STATE_COOKIE_NAME,
        value=state,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=OAUTH_STATE_MAX_AGE,
    )


def clear_oauth_state_cookie(response: Response, secure: bool) -> None:
    response.set_cookie(
        key=OAUTH_STATE_COOKIE_NAME, value="", path="/", httponly=True, secure=secure, samesite="lax", max_age=0
    )
