"""Authentication dependencies for FastAPI endpoints."""

import logging

from collections.abc import Callable

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi import status

from moderation_api.auth.jwt_service import JWTService
from moderation_api.auth.models import Identity
from moderation_api.database.models.base import UserRole

logger = logging.getLogger(__name__)

ROLE_HIERARCHY = {
    UserRole.USER: 0,
    UserRole.MODERATOR: 1,
    UserRole.ADMIN: 2,
}


def _bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_identity(request: Request) -> Identity:
    """Verify the bearer credential and return the caller's identity."""
    token = _bearer_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = JWTService().decode_token(token)
    if claims is None:
        logger.warning("Rejected invalid bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Identity(user_pk=claims.sub, role=claims.role)


# Create dependency instance to avoid function calls in defaults
get_current_identity_dependency = Depends(get_current_identity)


def require_role(required_role: UserRole) -> Callable:
    """Dependency factory to require a specific role or higher."""

    async def role_dependency(
        identity: Identity = get_current_identity_dependency,
    ) -> Identity:
        """Check if the caller has the required role."""
        user_level = ROLE_HIERARCHY.get(UserRole(identity.role), -1)
        required_level = ROLE_HIERARCHY.get(required_role, 999)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role.value}",
            )

        return identity

    return role_dependency


# Convenience dependencies for common roles
require_moderator = require_role(UserRole.MODERATOR)
require_admin = require_role(UserRole.ADMIN)
