"""GitHub OAuth handshake that yields a verified username."""

from urllib.parse import urlencode

import httpx
import structlog

from photogallery.core.core import Service
from photogallery.errors import IdentityProviderError

logger = structlog.get_logger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"  # noqa: S105
USER_URL = "https://api.github.com/user"
USER_AGENT = "PhotoGallery-App"


class IdentityService(Service):
    """Talks to the GitHub OAuth endpoints."""

    @property
    def redirect_uri(self) -> str:
        return f"{self.core.config.site_url.rstrip('/')}/api/auth/callback"

    def get_authorize_url(self, state: str) -> str:
        params = {
            "client_id": self.core.config.github_client_id,
            "redirect_uri": self.redirect_uri,
            "scope": "read:user",
            "state": state,
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, transport: httpx.AsyncBaseTransport | None = None) -> str:
        """Exchange an authorization code for the GitHub login of the user.

        Raises:
            IdentityProviderError: If GitHub rejects the code or returns an unexpected response
        """
        config = self.core.config
        try:
            async with httpx.AsyncClient(timeout=30.0, follow_redirects=False, transport=transport) as client:
                token_response = await client.post(
                    TOKEN_URL,
                    json={
                        "client_id": config.github_client_id,
                        "client_secret": config.github_client_secret,
                        "code": code,
                        "redirect_uri": self.redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
                token_response.raise_for_status()
                token_data = token_response.json()
                if not isinstance(token_data, dict):
                    raise IdentityProviderError("Malformed GitHub response")

                if "error" in token_data:
                    raise IdentityProviderError(token_data.get("error_description") or token_data["error"])
                access_token = token_data.get("access_token")
                if not access_token:
                    raise IdentityProviderError("No access token in response")

                user_response = await client.get(
                    USER_URL,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/vnd.github+json",
                        "User-Agent": USER_AGENT,
                    },
                )
                user_response.raise_for_status()
                user_data = user_response.json()
                login = user_data.get("login") if isinstance(user_data, dict) else None
        except httpx.HTTPError as e:
            logger.warning("OAuth exchange failed", error=str(e))
            raise IdentityProviderError("GitHub request failed") from e
        except ValueError as e:
            logger.warning("OAuth response was not JSON", error=str(e))
            raise IdentityProviderError("Malformed GitHub response") from e

        if not isinstance(login, str) or not login:
            raise IdentityProviderError("GitHub user has no login")
        return login
