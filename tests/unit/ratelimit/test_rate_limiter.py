import json

from photogallery.core.modules.ratelimit.limiter import EXPIRY_BUFFER_SECONDS, RateLimiter
from photogallery.core.modules.ratelimit.models import RateLimitResult


class TestRateLimiter:
    """Tests for the fixed-window limiter."""

    async def test_allows_up_to_limit_then_rejects(self, memory_store, clock):
        """Three allowed requests per window, the fourth is refused."""
        limiter = RateLimiter(memory_store, clock=clock)

        results = [await limiter.check("1.2.3.4", "likes-post", max_requests=3, window_seconds=60) for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]
        assert results[3].retry_after > 0
        assert all(r.limit == 3 for r in results)

    async def test_retry_after_counts_down_to_window_end(self, memory_store, clock):
        limiter = RateLimiter(memory_store, clock=clock)
        await limiter.check("ip", "upload", max_requests=1, window_seconds=60)

        clock.advance(45_000)
        result = await limiter.check("ip", "upload", max_requests=1, window_seconds=60)

        assert not result.allowed
        assert result.retry_after == 15

    async def test_retry_after_is_at_least_one_second(self, memory_store, clock):
        """A rejection at the very end of the window still asks the client to wait."""
        limiter = RateLimiter(memory_store, clock=clock)
        await limiter.check("ip", "upload", max_requests=1, window_seconds=60)

        clock.advance(60_000)
        result = await limiter.check("ip", "upload", max_requests=1, window_seconds=60)

        assert not result.allowed
        assert result.retry_after == 1

    async def test_window_resets_after_elapsed(self, memory_store, clock):
        """Once the window has passed, counting starts again from one."""
        limiter = RateLimiter(memory_store, clock=clock)
        for _ in range(4):
            await limiter.check("ip", "comments-post", max_requests=3, window_seconds=60)

        clock.advance(60_001)
        result = await limiter.check("ip", "comments-post", max_requests=3, window_seconds=60)

        assert result.allowed
        assert result.remaining == 2

    async def test_identities_are_isolated(self, memory_store, clock):
        limiter = RateLimiter(memory_store, clock=clock)
        await limiter.check("1.1.1.1", "upload", max_requests=1, window_seconds=60)

        other = await limiter.check("2.2.2.2", "upload", max_requests=1, window_seconds=60)

        assert other.allowed
        assert other.remaining == 0

    async def test_endpoints_are_isolated(self, memory_store, clock):
        limiter = RateLimiter(memory_store, clock=clock)
        await limiter.check("ip", "likes-get", max_requests=1, window_seconds=60)

        other = await limiter.check("ip", "likes-post", max_requests=1, window_seconds=60)

        assert other.allowed

    async def test_rejected_requests_keep_counting(self, memory_store, clock):
        """Every request in the window is recorded, including refused ones."""
        limiter = RateLimiter(memory_store, clock=clock)
        for _ in range(5):
            await limiter.check("ip", "upload", max_requests=3, window_seconds=60)

        stored = json.loads(memory_store.data[RateLimiter.key("upload", "ip")])

        assert stored == {"windowStart": clock.now, "count": 5}

    async def test_window_stored_with_expiry_buffer(self, memory_store, clock):
        """The stored window outlives the window by the buffer."""
        limiter = RateLimiter(memory_store, clock=clock)

        await limiter.check("ip", "upload", max_requests=3, window_seconds=60)

        assert memory_store.expiries["ratelimit:upload:ip"] == 60 + EXPIRY_BUFFER_SECONDS

    async def test_store_failure_fails_open(self, failing_store, clock):
        """An unreachable store never blocks requests."""
        limiter = RateLimiter(failing_store, clock=clock)

        results = [await limiter.check("ip", "upload", max_requests=1, window_seconds=60) for _ in range(3)]

        assert all(r.allowed for r in results)
        assert all(r.remaining == 1 for r in results)

    async def test_corrupt_window_fails_open(self, memory_store, clock):
        memory_store.data["ratelimit:upload:ip"] = "{not json"
        limiter = RateLimiter(memory_store, clock=clock)

        result = await limiter.check("ip", "upload", max_requests=1, window_seconds=60)

        assert result.allowed


class TestRateLimitResultHeaders:
    """Tests for the response headers derived from a result."""

    def test_allowed_result_has_no_retry_after(self):
        headers = RateLimitResult(allowed=True, limit=10, remaining=7).headers()

        assert headers == {"X-RateLimit-Limit": "10", "X-RateLimit-Remaining": "7"}

    def test_rejected_result_has_retry_after(self):
        headers = RateLimitResult(allowed=False, retry_after=12, limit=10, remaining=0).headers()

        assert headers["Retry-After"] == "12"
        assert headers["X-RateLimit-Remaining"] == "0"
