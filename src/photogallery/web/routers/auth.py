import secrets
from typing import Annotated

from fastapi import APIRouter, Cookie, Response
from fastapi.responses import RedirectResponse

from photogallery.core.modules.session.models import SessionStatus
from photogallery.errors import AccessDeniedError, ValidationError
from photogallery.web.cookies import (
    OAUTH_STATE_COOKIE_NAME,
    clear_oauth_state_cookie,
    clear_session_cookie,
    set_oauth_state_cookie,
    set_session_cookie,
)
from photogallery.web.deps import AppDep, ConfigDep, SessionCookieDep
from photogallery.web.openapi import ErrorResponse, SuccessResponse

router = APIRouter(tags=["auth"])

UPLOAD_PAGE = "/upload.html"


@router.get(
    "/auth/login",
    summary="Start login",
    description="Redirect to GitHub to authorize. A random state value is stored in a short-lived cookie.",
    operation_id="login",
    status_code=302,
    response_class=RedirectResponse,
)
async def login(app: AppDep, config: ConfigDep) -> RedirectResponse:
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(app.get_login_url(state), status_code=302)
    set_oauth_state_cookie(response, state, config.secure_cookies)
    return response


@router.get(
    "/auth/callback",
    summary="Complete login",
    description="GitHub redirects here with an authorization code. Only the site owner receives a session.",
    operation_id="loginCallback",
    status_code=302,
    response_class=RedirectResponse,
    responses={
        302: {"description": "Session issued, redirect to the upload page"},
        400: {"model": ErrorResponse, "description": "OAuth error or missing code"},
        403: {"model": ErrorResponse, "description": "State mismatch or not the site owner"},
        502: {"model": ErrorResponse, "description": "GitHub handshake failed"},
    },
)
async def callback(
    app: AppDep,
    config: ConfigDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth_state: Annotated[str | None, Cookie(alias=OAUTH_STATE_COOKIE_NAME)] = None,
) -> RedirectResponse:
    if error:
        raise ValidationError(f"OAuth Error: {error}")
    if not code:
        raise ValidationError("Missing authorization code")
    if not state or not oauth_state or not secrets.compare_digest(state, oauth_state):
        raise AccessDeniedError("Invalid state parameter. Possible CSRF attack detected.")

    token = await app.login(code)

    response = RedirectResponse(UPLOAD_PAGE, status_code=302)
    set_session_cookie(response, token, config.secure_cookies)
    clear_oauth_state_cookie(response, config.secure_cookies)
    return response


@router.post(
    "/auth/logout",
    summary="End session",
    description="Clear the session cookie. Tokens are stateless, so this only affects this browser.",
    operation_id="logout",
)
async def logout(config: ConfigDep, response: Response) -> SuccessResponse:
    clear_session_cookie(response, config.secure_cookies)
    return SuccessResponse()


@router.get(
    "/auth/status",
    summary="Session status",
    description="Report whether the session cookie is valid and for whom. Never fails with 401.",
    operation_id="getAuthStatus",
    response_model_exclude_none=True,
)
async def status(app: AppDep, session_cookie: SessionCookieDep) -> SessionStatus:
    return app.get_session_status(session_cookie)
