from contextlib import suppress
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from photogallery.core.core import Service
from photogallery.core.modules.like.models import Like, LikeStatus, LikeToggleResult
from photogallery.utils import hash_ip

logger = structlog.get_logger(__name__)


class LikeService(Service):
    """Anonymous likes keyed by a salted hash of the client address."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("likes")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("photo_name", 1), ("ip_hash", 1)], unique=True)
        await self._collection.create_index([("photo_name", 1)])

    def _hash(self, client_ip: str) -> str:
        return hash_ip(client_ip, self.core.config.ip_hash_salt)

    async def count_likes(self, photo_name: str) -> int:
        return await self._collection.count_documents({"photo_name": photo_name})

    async def get_status(self, photo_name: str, client_ip: str) -> LikeStatus:
        liked = await self._collection.find_one({"photo_name": photo_name, "ip_hash": self._hash(client_ip)})
        return LikeStatus(photo=photo_name, count=await self.count_likes(photo_name), liked=liked is not None)

    async def toggle_like(self, photo_name: str, client_ip: str) -> LikeToggleResult:
        """Like the photo, or remove the like if this client already liked it."""
        ip_hash = self._hash(client_ip)
        result = await self._collection.delete_one({"photo_name": photo_name, "ip_hash": ip_hash})
        if result.deleted_count:
            action, liked = "unliked", False
        else:
            # A concurrent request from the same client may have inserted it first
            with suppress(DuplicateKeyError):
                await self._collection.insert_one(Like(photo_name=photo_name, ip_hash=ip_hash).to_mongo())
            action, liked = "liked", True

        logger.debug("Like toggled", photo=photo_name, action=action)
        return LikeToggleResult(action=action, photo=photo_name, count=await self.count_likes(photo_name), liked=liked)
