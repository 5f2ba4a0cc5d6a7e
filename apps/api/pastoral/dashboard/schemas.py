"""Pydantic schemas for the dashboard module."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from pastoral.activities.schemas import EventResponse, MeetingResponse
from pastoral.baptisms.schemas import BaptismResponse


class SummaryResponse(BaseModel):
    """Home page cards."""

    next_baptism: Optional[BaptismResponse] = None
    next_meeting: Optional[MeetingResponse] = None
    next_event: Optional[EventResponse] = None
    active_notifications: int = 0


class ScaleMemberResponse(BaseModel):
    id: int
    user_id: str
    user_name: Optional[str]
    user_role: Optional[str]
    ceremony_role: Optional[str]
    presence_status: str


class PresenceScaleEntry(BaseModel):
    id: int
    child_name: str
    status: str
    scheduled_date: Optional[date]
    celebrant_id: Optional[str]
    city: Optional[str]
    members: list[ScaleMemberResponse]


class EvolutionPoint(BaseModel):
    name: str
    month: int
    year: int
    quantity: int


class FinanceBIPoint(BaseModel):
    month: str  # YYYY-MM
    entry: float
    exit: float
    balance: float


class AnnualGoalResponse(BaseModel):
    goal: int
    achieved: int
    progress: float


class AnnualGoalUpdateRequest(BaseModel):
    goal: int = Field(..., gt=0)
