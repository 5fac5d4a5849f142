from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.token_service import TokenService
from ...application.services.user_service import UserService
from ...core.dependencies import get_token_service, get_user_service
from ...domain.exceptions import UserNotFoundError
from ...domain.models import Role, User, UserRole

_bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    claims = tokens.decode(credentials.credentials)
    if not claims:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    try:
        user = user_service.get_profile(claims.user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found") from exc

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is disabled")
    return user


def require_role(minimum: UserRole) -> Callable[..., User]:
    """Dependency factory admitting users whose role ranks at least ``minimum``."""
    required = Role.from_enum(minimum)

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.role.has_privileges_of(required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")
        return user

    return dependency


require_admin_user = require_role(UserRole.ADMIN)
require_superadmin_user = require_role(UserRole.SUPERADMIN)
