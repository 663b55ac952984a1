from datetime import timedelta
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from photogallery.core.core import Service
from photogallery.utils import now


class KeyValueService(Service):
    """MongoDB-backed key-value store.

    Each key is a document `{_id: key, value, expires_at}`. A TTL index on
    `expires_at` removes stale keys, and reads filter on it as well because
    the TTL monitor only runs periodically.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("kv")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def get(self, key: str) -> str | None:
        doc = await self._collection.find_one(
            {"_id": key, "$or": [{"expires_at": None}, {"expires_at": {"$gt": now()}}]},
        )
        if doc is None:
            return None
        return str(doc["value"])

    async def put(self, key: str, value: str, expire_after_seconds: int | None = None) -> None:
        expires_at = now() + timedelta(seconds=expire_after_seconds) if expire_after_seconds is not None else None
        await self._collection.replace_one(
            {"_id": key},
            {"_id": key, "value": value, "expires_at": expires_at},
            upsert=True,
        )

    async def delete(self, key: str) -> None:
        await self._collection.delete_one({"_id": key})
