from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import get_current_user, get_optional_user
from pastoral.auth.identity import IdentityProvider, get_identity_provider
from pastoral.auth.schemas import (
    CurrentUserResponse,
    ProfileUpdateRequest,
    SuccessResponse,
)
from pastoral.auth.service import AuthService
from pastoral.common.db import get_db
from pastoral.common.models import User
from pastoral.members.service import MemberService

router = APIRouter(prefix="/auth", tags=["auth"])

SESSION_COOKIE_NAME = "app_session_id"


@router.get("/me", response_model=Optional[CurrentUserResponse])
async def me(user: Optional[User] = Depends(get_optional_user)):
    """Return the signed-in member, or null for anonymous callers."""
    if user is None:
        return None
    return CurrentUserResponse.from_model(user)


@router.post("/sync", response_model=CurrentUserResponse)
async def sync(
    user: User = Depends(get_current_user),
    provider: IdentityProvider = Depends(get_identity_provider),
    db: Session = Depends(get_db),
):
    user = AuthService.sync_user(db, provider, user)
    return CurrentUserResponse.from_model(user)


@router.get("/profile/{user_id}", response_model=CurrentUserResponse)
async def get_profile(
    user_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CurrentUserResponse.from_model(MemberService.get_member(db, user_id))


@router.patch("/profile", response_model=CurrentUserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit the caller's own profile."""
    updated = MemberService.update_member(
        db, user.id, **request.changes()
    )
    return CurrentUserResponse.from_model(updated)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return SuccessResponse()
