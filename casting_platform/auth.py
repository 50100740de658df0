"""Bearer-token authentication.

Tokens are issued elsewhere; this module only verifies them and resolves
the user they name.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from casting_platform.config import JWT_ALGORITHM, JWT_SECRET
from casting_platform.database import get_db
from casting_platform.models.api.users import UserResponse
from casting_platform.repositories.user_repository import UserRepository
from casting_platform.services.exceptions import NotAuthenticatedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify the signature and expiry of a token and return its claims."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise NotAuthenticatedError("Token has expired.")
    except jwt.InvalidTokenError as e:
        logger.warning("Rejected invalid token: %s", e.__class__.__name__)
        raise NotAuthenticatedError("Invalid token.")


def user_id_from_claims(claims: Dict[str, Any]) -> UUID:
    subject = claims.get("userId") or claims.get("sub")
    if not subject:
        raise NotAuthenticatedError("Invalid token.")
    try:
        return UUID(str(subject))
    except ValueError:
        logger.warning("Rejected token with malformed subject")
        raise NotAuthenticatedError("Invalid token.")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Dependency resolving the authenticated user from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError("Authentication required.")

    user_id = user_id_from_claims(decode_token(credentials.credentials))
    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        logger.warning("Token subject %s does not match a user", user_id)
        raise NotAuthenticatedError("User not found.")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[UserResponse]:
    """Like ``get_current_user`` for public routes: no token means anonymous."""
    if credentials is None or not credentials.credentials:
        return None
    return await get_current_user(credentials, db)
