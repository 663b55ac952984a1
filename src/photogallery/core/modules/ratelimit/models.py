"""Rate limiting models."""

from pydantic import BaseModel, Field


class RateLimitWindow(BaseModel):
    """Counting window for one (endpoint, client) pair, as stored in the key-value store."""

    window_start: int = Field(..., alias="windowStart")  # Epoch milliseconds
    count: int = 0

    model_config = {"populate_by_name": True}


class RateLimitResult(BaseModel):
    """Outcome of a rate limit check."""

    allowed: bool
    retry_after: int = 0  # Seconds until the window resets, 0 when allowed
    limit: int
    remaining: int

    def headers(self) -> dict[str, str]:
        """HTTP headers describing this result."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
        }
        if self.retry_after > 0:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimitPolicy(BaseModel):
    """Request budget for one endpoint."""

    endpoint: str
    max_requests: int = Field(10, ge=1)
    window_seconds: int = Field(60, ge=1)


LIKES_GET = RateLimitPolicy(endpoint="likes-get", max_requests=30, window_seconds=60)
LIKES_POST = RateLimitPolicy(endpoint="likes-post", max_requests=10, window_seconds=60)
COMMENTS_POST = RateLimitPolicy(endpoint="comments-post", max_requests=3, window_seconds=60)
UPLOAD = RateLimitPolicy(endpoint="upload", max_requests=10, window_seconds=60)
