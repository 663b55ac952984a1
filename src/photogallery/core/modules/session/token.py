"""Minting and verification of signed session tokens.

Wire format: ``base64(payload_json) + "." + hex(hmac_sha256(secret, payload_json))``
where the payload is ``{"username": ..., "exp": <epoch ms>}``. The signature
always covers the exact bytes carried in the token, never a re-serialization.

Tokens are stateless and cannot be revoked before ``exp``.
"""

import base64
import binascii
import hashlib
import hmac
import json

import pydantic

from photogallery.core.modules.session.models import SESSION_TTL_SECONDS, SessionPayload, SessionToken
from photogallery.utils import now_ms


def mint_session_token(username: str, secret: str, now: int | None = None) -> SessionToken:
    """Issue a token for an already authorized username, valid for 30 days.

    Raises:
        ValueError: If username or secret is empty
    """
    if not username:
        raise ValueError("username must not be empty")
    if not secret:
        raise ValueError("session secret must not be empty")

    issued_at = now_ms() if now is None else now
    serialized = json.dumps(
        {"username": username, "exp": issued_at + SESSION_TTL_SECONDS * 1000},
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    encoded_payload = base64.b64encode(serialized).decode("ascii")
    return SessionToken(f"{encoded_payload}.{_sign(serialized, secret)}")


def verify_session_token(token: str, secret: str, now: int | None = None) -> SessionPayload | None:
    """Return the payload of a valid token, or None.

    Never raises: malformed, expired and forged tokens are all reported as None.
    """
    if not isinstance(token, str) or not secret:
        return None

    encoded_payload, _, signature = token.partition(".")
    if not encoded_payload or not signature:
        return None

    try:
        serialized = base64.b64decode(encoded_payload, validate=True)
        # Non-canonical base64 (e.g. altered padding bits) decodes to the same bytes
        if base64.b64encode(serialized).decode("ascii") != encoded_payload:
            return None
        payload = SessionPayload.model_validate_json(serialized)
    except (binascii.Error, ValueError, pydantic.ValidationError):
        return None

    current = now_ms() if now is None else now
    if payload.exp <= current:
        return None

    expected = _sign(serialized, secret)
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "surrogatepass")):
        return None

    return payload


def _sign(data: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), data, hashlib.sha256).hexdigest()
