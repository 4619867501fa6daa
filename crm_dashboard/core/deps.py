"""Dependency injection utilities for FastAPI routes."""

from typing import Annotated

from fastapi import Cookie, Depends, Header, HTTPException, status

from crm_dashboard.core.security import Principal, decode_access_token

# Cookie name for auth token
AUTH_COOKIE_NAME = "crm_token"


async def get_token(
    authorization: Annotated[str | None, Header()] = None,
    crm_token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Extract the auth token from the Authorization header or the cookie."""
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials
    return crm_token


async def get_current_principal(
    token: Annotated[str | None, Depends(get_token)],
) -> Principal:
    """Get the authenticated caller.

    Raises HTTPException 401 if not authenticated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if token is None:
        raise credentials_exception

    principal = decode_access_token(token)
    if principal is None:
        raise credentials_exception

    return principal


# Type aliases for dependency injection
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
