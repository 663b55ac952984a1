from collections.abc import Awaitable, Callable
from typing import Annotated, cast

from fastapi import Depends, Request, Response
from fastapi.security import APIKeyCookie

from photogallery.app import App
from photogallery.config import Config
from photogallery.core.modules.ratelimit.models import RateLimitPolicy, RateLimitResult
from photogallery.core.modules.session.models import SESSION_COOKIE_NAME, SessionToken
from photogallery.errors import AuthenticationError

# Security schemes
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_session_cookie(token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None) -> str | None:
    """Raw session cookie value, unverified."""
    return token_cookie


async def get_session_token(
    app: Annotated[App, Depends(get_app)],
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> SessionToken:
    """Get and validate the session token from the session cookie."""
    if token_cookie and app.is_session_valid(token_cookie):
        return SessionToken(token_cookie)
    raise AuthenticationError


def get_client_ip(request: Request) -> str:
    """Best-effort client address: CDN header, then proxy chain, then socket peer."""
    connecting_ip = request.headers.get("cf-connecting-ip")
    if connecting_ip:
        return connecting_ip.strip()
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(policy: RateLimitPolicy) -> Callable[..., Awaitable[RateLimitResult]]:
    """Dependency that counts the request against `policy` and adds X-RateLimit-* headers.

    The result is also kept on `request.state` so error responses carry the headers.
    """

    async def dependency(
        app: Annotated[App, Depends(get_app)],
        client_ip: Annotated[str, Depends(get_client_ip)],
        request: Request,
        response: Response,
    ) -> RateLimitResult:
        result = await app.check_rate_limit(client_ip, policy)
        request.state.rate_limit = result
        response.headers.update(result.headers())
        return result

    return dependency


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
SessionCookieDep = Annotated[str | None, Depends(get_session_cookie)]
AuthTokenDep = Annotated[SessionToken, Depends(get_session_token)]
ClientIpDep = Annotated[str, Depends(get_client_ip)]
