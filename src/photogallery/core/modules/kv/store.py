"""Key-value store contract shared by the rate limiter and photo bookkeeping."""

from typing import Protocol


class KeyValueStore(Protocol):
    """String key-value store with optional per-key expiry.

    Expired keys behave exactly like absent keys.
    """

    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str, expire_after_seconds: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...
