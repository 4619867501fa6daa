"""Security utilities for JWT token handling."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel

from crm_dashboard.core.config import get_settings

settings = get_settings()

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 1 day


class Principal(BaseModel):
    """Authenticated caller decoded from a JWT."""

    user_id: str
    role: str | None = None
    exp: datetime


def create_access_token(
    user_id: str,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Tokens are normally issued by the CRM's auth service; this helper mints
    compatible tokens for local development and tests.

    Args:
        user_id: The user's identifier
        role: The user's role display name
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode: dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "exp": expire,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Principal | None:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string

    Returns:
        Principal if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    exp = payload.get("exp")
    if user_id is None or exp is None:
        return None

    return Principal(
        user_id=str(user_id),
        role=payload.get("role"),
        exp=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
