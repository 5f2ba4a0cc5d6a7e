"""Pastoral members API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import get_current_user, require_staff
from pastoral.common.db import get_db
from pastoral.common.models import MemberStatus, User
from pastoral.members import schemas
from pastoral.members.service import MemberService

router = APIRouter(prefix="/pastoral-members", tags=["pastoralMembers"])


@router.get("", response_model=list[schemas.MemberResponse])
async def list_members(
    status_filter: Optional[MemberStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List members ordered by name."""
    members = MemberService.list_members(
        db, status=status_filter.value if status_filter else None
    )
    return [schemas.MemberResponse.from_model(m) for m in members]


@router.get("/{member_id}", response_model=schemas.MemberResponse)
async def get_member(
    member_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a member by ID."""
    return schemas.MemberResponse.from_model(MemberService.get_member(db, member_id))


@router.post("", response_model=schemas.MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    request: schemas.MemberCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Register a member manually."""
    fields = request.changes()
    fields.setdefault("role", request.role)
    fields.setdefault("status", request.status)
    member = MemberService.create_member(db, **fields)
    return schemas.MemberResponse.from_model(member)


@router.patch("/{member_id}", response_model=schemas.MemberResponse)
async def update_member(
    member_id: str,
    request: schemas.MemberUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Update a member; absent fields are left untouched."""
    member = MemberService.update_member(
        db, member_id, **request.changes()
    )
    return schemas.MemberResponse.from_model(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: str,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Delete a member with no linked records (409 otherwise)."""
    MemberService.delete_member(db, member_id)
