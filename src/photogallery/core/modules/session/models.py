"""Session token models."""

from typing import NewType

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr

SessionToken = NewType("SessionToken", str)

SESSION_COOKIE_NAME = "session"
SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


class SessionPayload(BaseModel):
    """Signed claims carried by a session token.

    `exp` is an absolute deadline in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    username: StrictStr
    exp: StrictInt


class SessionStatus(BaseModel):
    """Public view of the caller's authentication state."""

    authenticated: bool
    username: str | None = None
