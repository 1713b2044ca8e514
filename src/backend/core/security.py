"""Security utilities for authentication.

Passwords are bcrypt-hashed. Sessions are stateless: the whole session record
travels in the cookie as a JSON payload signed with HS256 under SECRET_KEY, so
a client that edits its cookie is treated as logged out.

Known limitations:
- Expiry is the cookie's Max-Age; the token itself carries no expiry claim.
- There is no revocation list. Logout deletes the cookie client-side, so a
  copied token stays valid until the browser would have dropped it.
"""

import secrets
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError

from core.config import settings
from schemas.session import SessionRecord

# Token issuer and audience for validation
TOKEN_ISSUER = "granteetrack-api"
TOKEN_AUDIENCE = "granteetrack-client"
SESSION_TOKEN_TYPE = "session"


# =============================================================================
# Passwords
# =============================================================================


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a stored bcrypt hash.

    bcrypt.checkpw compares digests in constant time. Malformed hashes and
    over-long passwords count as a mismatch rather than an error.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


@lru_cache
def dummy_password_hash() -> str:
    """Hash checked when the email is unknown, so both failures cost the same."""
    return hash_password(secrets.token_urlsafe(16))


# =============================================================================
# Session codec
# =============================================================================


def encode_session(record: SessionRecord) -> str:
    """Serialize a session record into a signed cookie value."""
    claims: dict[str, Any] = {
        "type": SESSION_TOKEN_TYPE,
        "iss": TOKEN_ISSUER,
        "aud": TOKEN_AUDIENCE,
        "iat": int(datetime.now(timezone.utc).timestamp()),
        "session": record.model_dump(mode="json", by_alias=True),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session(token: str | None) -> SessionRecord | None:
    """
    Parse a cookie value back into a session record.

    Returns None for a missing, malformed, re-signed or tampered token; the
    caller treats that as "not authenticated", never as an error.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=TOKEN_ISSUER,
            audience=TOKEN_AUDIENCE,
        )
    except JWTError:
        return None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None

    try:
        return SessionRecord.model_validate(payload.get("session"))
    except ValidationError:
        return None


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token."""
    return secrets.token_urlsafe(length)
