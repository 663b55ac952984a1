from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from photogallery.config import Config
from photogallery.core.core import Core
from photogallery.core.modules.comment.models import CommentView
from photogallery.core.modules.like.models import LikeStatus, LikeToggleResult
from photogallery.core.modules.photo.models import PhotoFile, PhotoList, PhotoSize, UploadedFile, UploadReport
from photogallery.core.modules.ratelimit.models import RateLimitPolicy, RateLimitResult
from photogallery.core.modules.session.models import SessionStatus, SessionToken
from photogallery.errors import AccessDeniedError, RateLimitExceededError, ValidationError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @property
    def core(self) -> Core:
        return self._core

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Sessions ===
    def is_session_valid(self, token: str | None) -> bool:
        """Check if a session token is valid."""
        return self._core.services.session.is_session_valid(token)

    def get_session_status(self, token: str | None) -> SessionStatus:
        """Report whether the caller is signed in, never raising."""
        return self._core.services.session.get_status(token)

    def get_login_url(self, state: str) -> str:
        """Identity provider URL that starts the OAuth handshake."""
        return self._core.services.identity.get_authorize_url(state)

    async def login(self, code: str) -> SessionToken:
        """Complete the OAuth handshake and issue a session for the site owner only."""
        username = await self._core.services.identity.exchange_code(code)
        if not self._core.services.access.is_owner(username):
            logger.warning("Login refused for non-owner", username=username)
            raise AccessDeniedError(f"Access Denied: Only {self._core.config.allowed_username} can upload photos.")
        return self._core.services.session.create_session(username)

    # === Rate limiting ===
    async def check_rate_limit(self, client_ip: str, policy: RateLimitPolicy) -> RateLimitResult:
        """Count a request against a policy, raise RateLimitExceededError when over budget."""
        result = await self._core.services.ratelimit.check(client_ip, policy)
        if not result.allowed:
            raise RateLimitExceededError(result)
        return result

    # === Likes ===
    async def get_likes(self, photo: str | None, client_ip: str) -> LikeStatus:
        if not photo:
            raise ValidationError("Missing photo parameter")
        return await self._core.services.like.get_status(photo, client_ip)

    async def toggle_like(self, photo: str | None, client_ip: str) -> LikeToggleResult:
        if not photo:
            raise ValidationError("Missing photo in request body")
        return await self._core.services.like.toggle_like(photo, client_ip)

    # === Comments ===
    async def get_comments(self, photo: str | None) -> list[CommentView]:
        if not photo:
            raise ValidationError("Missing photo parameter")
        return await self._core.services.comment.get_photo_comments(photo)

    async def create_comment(
        self, photo: str | None, author: str | None, text: str | None, client_ip: str, user_agent: str | None
    ) -> CommentView:
        return await self._core.services.comment.create_comment(photo, author, text, client_ip, user_agent)

    async def delete_comment(self, token: SessionToken, comment_id: int) -> None:
        """Delete a comment (owner only)."""
        self._core.services.access.ensure_owner(token)
        await self._core.services.comment.delete_comment(comment_id)

    # === Photos ===
    async def upload_photos(self, token: SessionToken, files: list[UploadedFile]) -> UploadReport:
        """Upload photos to the gallery (owner only)."""
        self._core.services.access.ensure_owner(token)
        return await self._core.services.photo.upload_photos(files)

    async def list_photos(self, include_metadata: bool = False) -> PhotoList:
        return await self._core.services.photo.list_photos(include_metadata)

    def get_photo_file(self, filename: str, size: PhotoSize) -> PhotoFile:
        return self._core.services.photo.get_photo_file(filename, size)

    def track_photo_view(
        self, filename: str, size: PhotoSize, client_ip: str, referer: str | None, user_agent: str | None
    ) -> None:
        self._core.services.photo.schedule_view_tracking(filename, size, client_ip, referer, user_agent)
