"""Password hashing and JWT session token creation/verification."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import bcrypt
import jwt
from fastapi import Request, Response

from studentms.core.clock import utcnow
from studentms.core.config import get_settings
from studentms.core.errors import (
    MissingTokenError,
    TokenExpiredError,
    TokenInvalidError,
)

# Min/max lengths for identity and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 8

# bcrypt only accepts 72 bytes of input; longer passwords are rejected, never truncated.
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by a verified session token."""

    sub: str
    role: str


def password_too_long(plain_password: str) -> bool:
    return len(plain_password.encode("utf-8")) > BCRYPT_MAX_BYTES


def hash_password(plain_password: str) -> str:
    """
    Hash a plain-text password for storage. Do not store plain passwords.

    Raises ValueError for input longer than BCRYPT_MAX_BYTES; callers validate first.
    """
    if password_too_long(plain_password):
        raise ValueError(f"password cannot be longer than {BCRYPT_MAX_BYTES} bytes")
    pw_bytes = plain_password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Over-long input never matches."""
    if password_too_long(plain_password):
        return False
    pw_bytes = plain_password.encode("utf-8")
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(sub: str, role: str, now: datetime | None = None) -> str:
    """Create a JWT access token with sub (user id), role, iat and exp."""
    settings = get_settings()
    issued_at = now or utcnow()
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, now: datetime | None = None) -> TokenClaims:
    """
    Verify signature and expiry and return the embedded claims.

    Expiry is checked against ``now`` (defaults to the current time) rather than
    PyJWT's own clock so that callers and tests can inject time.
    Raises TokenExpiredError or TokenInvalidError.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": False, "verify_iat": False, "require": ["exp", "sub"]},
        )
    except jwt.PyJWTError:
        raise TokenInvalidError()

    exp = payload.get("exp")
    sub = payload.get("sub")
    role = payload.get("role")
    if not isinstance(exp, (int, float)) or not sub or not isinstance(role, str):
        raise TokenInvalidError()
    current = now or utcnow()
    if current.timestamp() > exp:
        raise TokenExpiredError()
    return TokenClaims(sub=str(sub), role=role)


def extract_token(request: Request) -> str:
    """Return the session token from the auth cookie, else the Bearer header."""
    token = request.cookies.get(get_settings().AUTH_COOKIE_NAME)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    scheme, _, credentials = auth_header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    raise MissingTokenError()


def _cookie_attributes() -> dict[str, Any]:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "strict",
        "path": "/",
    }


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie with the token's TTL."""
    settings = get_settings()
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        **_cookie_attributes(),
    )


def clear_session_cookie(response: Response) -> None:
    # Attributes must match set_session_cookie or some browsers keep the cookie.
    response.delete_cookie(get_settings().AUTH_COOKIE_NAME, **_cookie_attributes())
