"""System API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from pastoral.auth.dependencies import require_admin
from pastoral.common.models import User
from pastoral.system import schemas
from pastoral.system.service import NotificationService

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/health", response_model=schemas.HealthResponse)
async def health(timestamp: float = Query(..., ge=0)):
    """Liveness check used by the web client."""
    return schemas.HealthResponse()


@router.post("/notify-owner", response_model=schemas.NotifyOwnerResponse)
async def notify_owner(
    request: schemas.NotifyOwnerRequest,
    admin: User = Depends(require_admin),
):
    delivered = NotificationService.notify_owner(request.title, request.content)
    return schemas.NotifyOwnerResponse(success=delivered)
