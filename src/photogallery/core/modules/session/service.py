import structlog

from photogallery.core.core import Service
from photogallery.core.modules.session.models import SessionPayload, SessionStatus, SessionToken
from photogallery.core.modules.session.token import mint_session_token, verify_session_token

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Issues and checks signed session tokens using the deployment secret."""

    def create_session(self, username: str) -> SessionToken:
        token = mint_session_token(username, self.core.config.session_secret)
        logger.info("Session issued", username=username)
        return token

    def get_session(self, token: str | None) -> SessionPayload | None:
        """Verify a token from the session cookie; None when missing or invalid."""
        if not token:
            return None
        return verify_session_token(token, self.core.config.session_secret)

    def is_session_valid(self, token: str | None) -> bool:
        return self.get_session(token) is not None

    def get_status(self, token: str | None) -> SessionStatus:
        payload = self.get_session(token)
        if payload is None:
            return SessionStatus(authenticated=False)
        return SessionStatus(authenticated=True, username=payload.username)
