"""Shared API dependencies for authentication and role checks."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vowswap.core.security import MODERATION_ROLES, PROMOTION_ROLES, Role, decode_subject
from vowswap.db.session import get_db
from vowswap.models import User
from vowswap.services.access import ensure_capability

# HTTP Bearer scheme; a missing header is reported as 401 below rather than by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from the identity provider's token.

    Raises:
        HTTPException: 401 if the token is missing or invalid or the user is
            unknown, 403 if the account is suspended
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    user_id = decode_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if user.is_suspended:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account suspended",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def require_roles(allowed: frozenset[Role]) -> Callable[[User], User]:
    """Build a dependency admitting only users whose role is in ``allowed``."""

    def _dependency(current_user: CurrentUserDep) -> User:
        return ensure_capability(current_user, allowed)

    return _dependency


ModeratorDep = Annotated[User, Depends(require_roles(MODERATION_ROLES))]
SellerDep = Annotated[User, Depends(require_roles(PROMOTION_ROLES))]
