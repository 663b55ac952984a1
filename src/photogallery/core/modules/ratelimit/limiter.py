"""Fixed-window request counter on top of a key-value store.

The read-increment-write sequence is not atomic: concurrent requests for the
same key may read the same count and each write back count + 1, so bursts can
slightly exceed the limit. The store contract has no atomic increment.
"""

import math
from collections.abc import Callable

import structlog

from photogallery.core.modules.kv.store import KeyValueStore
from photogallery.core.modules.ratelimit.models import RateLimitResult, RateLimitWindow
from photogallery.utils import now_ms

logger = structlog.get_logger(__name__)

# Stored windows outlive the window itself so the store cleans up idle keys
EXPIRY_BUFFER_SECONDS = 60


class RateLimiter:
    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = now_ms) -> None:
        self._store = store
        self._clock = clock

    @staticmethod
    def key(endpoint: str, identity: str) -> str:
        return f"ratelimit:{endpoint}:{identity}"

    async def check(self, identity: str, endpoint: str, max_requests: int = 10, window_seconds: int = 60) -> RateLimitResult:
        """Count this request and decide whether it is within the budget.

        Store failures fail open: the request is allowed with a full budget.
        """
        try:
            return await self._check(identity, endpoint, max_requests, window_seconds)
        except Exception:
            logger.exception("Rate limit check failed, allowing request", endpoint=endpoint)
            return RateLimitResult(allowed=True, retry_after=0, limit=max_requests, remaining=max_requests)

    async def _check(self, identity: str, endpoint: str, max_requests: int, window_seconds: int) -> RateLimitResult:
        now = self._clock()
        window_ms = window_seconds * 1000
        key = self.key(endpoint, identity)

        raw = await self._store.get(key)
        window = RateLimitWindow.model_validate_json(raw) if raw is not None else None
        if window is None or now - window.window_start > window_ms:
            window = RateLimitWindow(window_start=now, count=0)

        # Counted before the threshold test, so the rejected request is counted too
        window.count += 1
        await self._store.put(
            key,
            window.model_dump_json(by_alias=True),
            expire_after_seconds=window_seconds + EXPIRY_BUFFER_SECONDS,
        )

        if window.count > max_requests:
            retry_after = max(1, math.ceil((window.window_start + window_ms - now) / 1000))
            logger.info("Rate limit exceeded", endpoint=endpoint, count=window.count, retry_after=retry_after)
            return RateLimitResult(allowed=False, retry_after=retry_after, limit=max_requests, remaining=0)

        return RateLimitResult(allowed=True, retry_after=0, limit=max_requests, remaining=max_requests - window.count)
