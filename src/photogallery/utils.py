import hashlib
import time
from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def hash_ip(ip: str, salt: str = "", length: int | None = None) -> str:
    """One-way hash of a client IP, so addresses are never stored in clear."""
    digest = hashlib.sha256(f"{ip}{salt}".encode()).hexdigest()
    return digest[:length] if length else digest
