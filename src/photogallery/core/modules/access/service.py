from photogallery.core.core import Service
from photogallery.core.modules.session.models import SessionPayload
from photogallery.errors import AccessDeniedError, AuthenticationError


class AccessService(Service):
    def ensure_authenticated(self, token: str | None) -> SessionPayload:
        """Ensure the request carries a valid session token."""
        payload = self.core.services.session.get_session(token)
        if payload is None:
            raise AuthenticationError
        return payload

    def ensure_owner(self, token: str | None) -> SessionPayload:
        """Ensure the session belongs to the site owner, raise AccessDeniedError if not."""
        payload = self.ensure_authenticated(token)
        if payload.username != self.core.config.allowed_username:
            raise AccessDeniedError
        return payload

    def is_owner(self, username: str) -> bool:
        return username == self.core.config.allowed_username
