from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from photogallery.core.core import Service
from photogallery.core.modules.comment.models import Comment, CommentView
from photogallery.core.modules.comment.validators import validate_comment
from photogallery.core.modules.counter.models import CounterType
from photogallery.errors import NotFoundError
from photogallery.utils import hash_ip

logger = structlog.get_logger(__name__)


class CommentService(Service):
    """Manages visitor comments on photos with auto-increment ids."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("comments")

    async def on_start(self) -> None:
        """Create indexes for photo lookup."""
        await self._collection.create_index([("photo_name", 1), ("created_at", -1)])

    async def get_photo_comments(self, photo_name: str) -> list[CommentView]:
        """Get comments for a photo, newest first."""
        cursor = self._collection.find({"photo_name": photo_name}).sort("created_at", -1)
        return [CommentView.from_domain(comment) for comment in await Comment.list_cursor(cursor)]

    async def create_comment(
        self, photo: str | None, author: str | None, text: str | None, client_ip: str, user_agent: str | None
    ) -> CommentView:
        photo_name, author_name, comment_text = validate_comment(photo, author, text)
        comment = Comment(
            id=await self.core.services.counter.get_next_sequence(CounterType.COMMENT),
            photo_name=photo_name,
            author_name=author_name,
            comment_text=comment_text,
            ip_hash=hash_ip(client_ip, self.core.config.ip_hash_salt, length=16),
            user_agent=user_agent or "unknown",
        )
        await self._collection.insert_one(comment.to_mongo())
        logger.debug("Created comment", comment_id=comment.id, photo=photo_name)
        return CommentView.from_domain(comment)

    async def delete_comment(self, comment_id: int) -> None:
        result = await self._collection.delete_one({"_id": comment_id})
        if result.deleted_count == 0:
            raise NotFoundError("Comment not found")
        logger.info("Deleted comment", comment_id=comment_id)
