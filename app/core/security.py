"""Security utilities: password hashing, JWT access tokens, refresh-token secrets."""

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ── Refresh-token secrets (SHA-256 at rest) ──────────────────

REFRESH_TOKEN_BYTES = 64


def generate_refresh_token() -> str:
    """Opaque URL-safe token carrying 512 bits of entropy."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def hash_refresh_token(raw_token: str) -> str:
    """One-way SHA-256 hash for refresh token storage.

    Lookups happen by hash, so the raw value never touches the database and
    no timing-sensitive string comparison of the secret is ever made.
    """
    return hashlib.sha256(raw_token.encode()).hexdigest()


# ── JWT ───────────────────────────────────────────────────────

def _signing_key() -> str:
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return settings.jwt_secret_key


def create_jwt(
    subject: str,
    claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """Sign an access token. Returns the encoded token and its expiry."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload: dict[str, Any] = {
        **(claims or {}),
        "sub": subject,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    token = jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)
    return token, expire


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT. Raises jose.JWTError on failure.

    Algorithm, issuer, audience and expiry are all checked, with no clock
    skew allowance.
    """
    return jwt.decode(
        token,
        _signing_key(),
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"leeway": 0},
    )
