"""FundRaiser Donation Backend - JWT authentication dependency."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import Settings, get_settings
from src.core.exceptions import AuthenticationError
from src.core.security import decode_access_token
from src.db import get_db
from src.models.user import User

TOKEN_COOKIE = "token"


def extract_token(request: Request) -> str | None:
    """Read the session token from the cookie, falling back to a Bearer header."""
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """FastAPI dependency to get current authenticated donor.

    Usage:
        @router.get("/me")
        async def get_me(user: User = Depends(get_current_user)):
            return user
    """
    token = extract_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")

    claims = decode_access_token(token, settings)
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid authentication token") from None

    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is disabled")
    return user
