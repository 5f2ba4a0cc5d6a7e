"""Dashboard API routes (cards, charts and the ceremony team scale)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pastoral.activities.schemas import EventResponse, MeetingResponse
from pastoral.auth.dependencies import get_current_user, require_admin, require_staff
from pastoral.baptisms.schemas import BaptismResponse
from pastoral.common.db import get_db
from pastoral.common.models import User
from pastoral.dashboard import schemas
from pastoral.dashboard.service import DashboardService
from pastoral.scale.schemas import PresenceUpdateRequest, ScaleAddRequest, ScheduleResponse
from pastoral.scale.service import ScaleService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=schemas.SummaryResponse)
async def get_summary(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Next baptism, meeting and event, plus the open request count."""
    summary = DashboardService.get_summary(db)
    baptism = summary["next_baptism"]
    meeting = summary["next_meeting"]
    event = summary["next_event"]
    return schemas.SummaryResponse(
        next_baptism=BaptismResponse.from_model(baptism) if baptism else None,
        next_meeting=MeetingResponse.from_model(meeting) if meeting else None,
        next_event=EventResponse.from_model(event) if event else None,
        active_notifications=summary["active_notifications"],
    )


@router.get("/presence-scale", response_model=list[schemas.PresenceScaleEntry])
async def get_presence_scale(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        schemas.PresenceScaleEntry(
            id=baptism.id,
            child_name=baptism.child_name,
            status=baptism.status,
            scheduled_date=baptism.scheduled_date,
            celebrant_id=baptism.celebrant_id,
            city=baptism.city,
            members=[
                schemas.ScaleMemberResponse(
                    id=schedule.id,
                    user_id=member.id,
                    user_name=member.name,
                    user_role=member.role,
                    ceremony_role=schedule.role,
                    presence_status=schedule.presence_status,
                )
                for schedule, member in team
            ],
        )
        for baptism, team in DashboardService.get_presence_scale(db)
    ]


@router.post("/scale", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def add_to_scale(
    request: ScaleAddRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Put a member on a baptism's team, pending confirmation."""
    schedule = ScaleService.add_to_scale(
        db,
        baptism_id=request.baptism_id,
        user_id=request.user_id,
        role=request.role,
    )
    return ScheduleResponse.from_model(schedule)


@router.delete("/scale/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_scale(
    schedule_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    ScaleService.remove_from_scale(db, schedule_id)


@router.patch("/scale/{schedule_id}/presence", response_model=ScheduleResponse)
async def update_presence_status(
    schedule_id: int,
    request: PresenceUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Confirm, decline or reset a presence; the service enforces who may do what."""
    schedule = ScaleService.update_presence_status(db, user, schedule_id, request.status)
    return ScheduleResponse.from_model(schedule)


@router.get("/evolution", response_model=list[schemas.EvolutionPoint])
async def get_evolution_data(
    year: Optional[int] = Query(None, ge=1900, le=2999),
    gender: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    age_group: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    points = DashboardService.get_evolution_data(
        db, year=year, gender=gender, city=city, age_group=age_group
    )
    return [schemas.EvolutionPoint(**p) for p in points]


@router.get("/finance-bi", response_model=list[schemas.FinanceBIPoint])
async def get_finance_bi(
    months: Optional[int] = Query(None, ge=1, le=36),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [schemas.FinanceBIPoint(**p) for p in DashboardService.get_finance_bi(db, months)]


@router.get("/annual-goal", response_model=schemas.AnnualGoalResponse)
async def get_annual_goal(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.AnnualGoalResponse(**DashboardService.get_annual_goal(db))


@router.put("/annual-goal", response_model=schemas.AnnualGoalResponse)
async def set_annual_goal(
    request: schemas.AnnualGoalUpdateRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change the yearly baptism target (admin only)."""
    DashboardService.set_annual_goal(db, request.goal, actor_id=admin.id)
    return schemas.AnnualGoalResponse(**DashboardService.get_annual_goal(db))


@router.get("/cities", response_model=list[str])
async def get_unique_cities(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return DashboardService.get_unique_cities(db)
