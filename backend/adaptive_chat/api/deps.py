"""
Request dependencies: bearer authentication and shared services.

Clients log in once (POST /users/login) and then send
`Authorization: Bearer <jwt>` on every protected call. The token only
carries the user id (`sub`) and an expiry; everything else is read from
the database per request, so a deleted account loses access immediately.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from adaptive_chat.config import get_settings
from adaptive_chat.db.models import User
from adaptive_chat.db.session import get_db
from adaptive_chat.errors import AuthError
from adaptive_chat.services.model_gateway import ModelGateway, get_model_gateway

settings = get_settings()

INVALID_TOKEN = "Could not validate credentials"


# =============================================================================
# TOKENS
# =============================================================================


def token_lifetime_seconds() -> int:
    return settings.jwt_expire_minutes * 60


def create_access_token(user_id: UUID) -> str:
    """Sign a session token for `user_id`, valid for JWT_EXPIRE_MINUTES."""
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(seconds=token_lifetime_seconds()),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID | None:
    """User id from a valid token; None for a bad signature, expiry or malformed subject."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return UUID(claims["sub"])
    except (JWTError, KeyError, ValueError):
        return None


# =============================================================================
# AUTHENTICATION
# =============================================================================


def _bearer_token(authorization: str | None) -> str | None:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """
    Resolve the caller from the bearer token.

    Raises AuthError (401) when the header is missing, the token does not
    verify, or the account no longer exists.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise AuthError("Not authenticated")

    user_id = decode_access_token(token)
    user = await db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise AuthError(INVALID_TOKEN)
    return user


# Type aliases for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Gateway = Annotated[ModelGateway, Depends(get_model_gateway)]
