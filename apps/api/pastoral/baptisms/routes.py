"""Baptisms and agenda API routes."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import get_current_user, require_staff
from pastoral.baptisms import schemas
from pastoral.baptisms.service import BaptismService
from pastoral.common.db import get_db
from pastoral.common.models import User

router = APIRouter(prefix="/baptisms", tags=["baptism"])
agenda_router = APIRouter(prefix="/agenda", tags=["agenda"])


@agenda_router.get("", response_model=list[schemas.BaptismResponse])
async def list_agenda(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List dated baptisms, earliest first."""
    baptisms = BaptismService.list_agenda(db, date_from=date_from, date_to=date_to)
    return [schemas.BaptismResponse.from_model(b) for b in baptisms]


@router.get("", response_model=list[schemas.BaptismResponse])
async def list_baptisms(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List baptisms, newest first."""
    return [schemas.BaptismResponse.from_model(b) for b in BaptismService.list_baptisms(db)]


@router.get("/{baptism_id}", response_model=schemas.BaptismResponse)
async def get_baptism(
    baptism_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.BaptismResponse.from_model(BaptismService.get_baptism(db, baptism_id))


@router.post("", response_model=schemas.BaptismResponse, status_code=status.HTTP_201_CREATED)
async def create_baptism(
    request: schemas.BaptismCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Register a baptism."""
    baptism = BaptismService.create_baptism(db, **request.model_dump())
    return schemas.BaptismResponse.from_model(baptism)


@router.patch("/{baptism_id}", response_model=schemas.BaptismResponse)
async def update_baptism(
    baptism_id: int,
    request: schemas.BaptismUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    baptism = BaptismService.update_baptism(
        db, baptism_id, **request.changes()
    )
    return schemas.BaptismResponse.from_model(baptism)


@router.delete("/{baptism_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_baptism(
    baptism_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Delete a baptism and its team scale."""
    BaptismService.delete_baptism(db, baptism_id)
