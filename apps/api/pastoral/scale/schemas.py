from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from pastoral.common.models import PresenceStatus, Schedule


class ScaleAddRequest(BaseModel):
    """Put a member on a baptism's team."""

    baptism_id: int
    user_id: str = Field(..., min_length=1)
    role: Optional[str] = Field(None, max_length=100)


class PresenceUpdateRequest(BaseModel):
    status: PresenceStatus


class ScheduleResponse(BaseModel):
    id: int
    baptism_id: int
    user_id: str
    role: Optional[str]
    presence_status: PresenceStatus

    @classmethod
    def from_model(cls, schedule: Schedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            baptism_id=schedule.baptism_id,
            user_id=schedule.user_id,
            role=schedule.role,
            presence_status=schedule.presence_status,
        )
