from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pastoral.auth.identity import IdentityProvider, get_identity_provider
from pastoral.auth.service import AuthService
from pastoral.common.db import get_db
from pastoral.common.models import User, UserRole
from pastoral.core.errors import ForbiddenError, UnauthorizedError

security = HTTPBearer(auto_error=False)

STAFF_ROLES = (UserRole.ADMIN, UserRole.SECRETARY)
FINANCE_ROLES = (UserRole.ADMIN, UserRole.FINANCE)


def resolve_request_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[User]:
    """Resolve the caller; None when the request carries no bearer token."""
    token = credentials.credentials if credentials else None
    user = AuthService.resolve_user(db, provider, token)
    if user is not None:
        request.state.user_id = user.id
    return user


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[User]:
    """Like resolve_request_user, but an invalid token also yields None."""
    try:
        return resolve_request_user(request, credentials, db, provider)
    except UnauthorizedError:
        return None


def get_current_user(
    user: Optional[User] = Depends(resolve_request_user),
) -> User:
    if user is None:
        raise UnauthorizedError()
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN.value:
        raise ForbiddenError()
    return user


def has_role(user: User, roles: tuple[UserRole, ...]) -> bool:
    return user.role in {r.value for r in roles}


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Build a dependency that admits only the given roles."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not has_role(user, roles):
            raise ForbiddenError()
        return user

    return dependency


require_staff = require_roles(*STAFF_ROLES)
require_finance = require_roles(*FINANCE_ROLES)
