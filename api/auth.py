"""
Bearer token authentication.

`get_current_user` decodes the JWT into a UserContext; `require_role`
builds a dependency that also checks the caller's role.
"""
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_settings
from core.application.dtos import UserContext
from core.domain.enums import UserRole
from core.domain.exceptions import AuthenticationError
from core.infrastructure.security import decode_access_token
from core.settings import AppSettings


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    settings: AppSettings = Depends(get_settings),
) -> UserContext:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials, settings.auth)
        return UserContext(
            id=payload["sub"],
            email=payload.get("email", ""),
            name=payload.get("name", ""),
            role=payload.get("role"),
        )
    except (AuthenticationError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_role(*roles: UserRole) -> Callable:
    """Dependency factory: the caller must hold one of `roles`."""
    allowed = {UserRole(r) for r in roles}

    async def checker(user: UserContext = Depends(get_current_user)) -> UserContext:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(sorted(r.value for r in allowed))}",
            )
        return user

    return checker


require_admin = require_role(UserRole.ADMIN)
require_producer = require_role(UserRole.PRODUCER)
require_buyer = require_role(UserRole.BUYER)
