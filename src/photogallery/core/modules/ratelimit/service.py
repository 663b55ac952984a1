from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from photogallery.core.core import Service
from photogallery.core.modules.ratelimit.limiter import RateLimiter
from photogallery.core.modules.ratelimit.models import RateLimitPolicy, RateLimitResult


class RateLimitService(Service):
    """Applies named rate limit policies per client identity."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._limiter: RateLimiter | None = None

    @property
    def limiter(self) -> RateLimiter:
        if self._limiter is None:
            self._limiter = RateLimiter(self.core.services.kv)
        return self._limiter

    async def check(self, identity: str, policy: RateLimitPolicy) -> RateLimitResult:
        return await self.limiter.check(identity, policy.endpoint, policy.max_requests, policy.window_seconds)
