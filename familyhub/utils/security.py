import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from jwt.exceptions import PyJWTError
from passlib.context import CryptContext

from familyhub.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)


class InvalidTokenError(Exception):
    """Raised when a token fails signature, expiry or type checks."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def issue_access(subject: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a short-lived access token for ``subject`` (a user id).

    Args:
        subject: User id to bind into the ``sub`` claim
        expires_delta: Optional lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT access token
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"sub": str(subject), "type": ACCESS_TOKEN_TYPE, "exp": expire}
    return jwt.encode(payload, settings.JWT_ACCESS_SECRET, algorithm=settings.ALGORITHM)


def issue_refresh(
    subject: int, expires_delta: Optional[timedelta] = None
) -> Tuple[str, str, datetime]:
    """
    Create a refresh token with a fresh unique identifier.

    Returns:
        ``(token, jti, expires_at)``; the caller persists ``jti`` and
        ``expires_at`` so the token can be checked server-side later.
    """
    jti = str(uuid.uuid4())
    # Whole seconds, matching what ends up in the ``exp`` claim
    expires_at = (
        datetime.now(timezone.utc)
        + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    ).replace(microsecond=0)
    payload = {
        "sub": str(subject),
        "jti": jti,
        "type": REFRESH_TOKEN_TYPE,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.JWT_REFRESH_SECRET, algorithm=settings.ALGORITHM)
    return token, jti, expires_at


def _verify(token: str, secret: str, token_type: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except PyJWTError as e:
        raise InvalidTokenError(str(e)) from e

    if payload.get("type") != token_type:
        raise InvalidTokenError(f"Expected a {token_type} token")
    return payload


def verify_access(token: str) -> dict:
    """Decode an access token. Raises InvalidTokenError if it is not valid."""
    return _verify(token, settings.JWT_ACCESS_SECRET, ACCESS_TOKEN_TYPE)


def verify_refresh(token: str) -> dict:
    """Decode a refresh token. Raises InvalidTokenError if it is not valid."""
    payload = _verify(token, settings.JWT_REFRESH_SECRET, REFRESH_TOKEN_TYPE)
    if not payload.get("jti"):
        raise InvalidTokenError("Refresh token has no identifier")
    return payload
