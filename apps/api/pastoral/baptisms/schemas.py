"""Pydantic schemas for the baptisms module."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from pastoral.common.models import AgeGroup, Baptism, BaptismStatus, Gender
from pastoral.common.schemas import WriteRequest


class BaptismCreateRequest(BaseModel):
    """Request to register a baptism."""

    child_name: str = Field(..., min_length=1, max_length=200)
    parent_names: Optional[str] = Field(None, max_length=500)
    godparents_names: Optional[str] = Field(None, max_length=500)
    status: BaptismStatus = BaptismStatus.SOLICITADO
    scheduled_date: Optional[date] = None
    celebrant_id: Optional[str] = None
    course_done: bool = False
    docs_ok: bool = False
    observations: Optional[str] = None
    gender: Optional[Gender] = None
    age_group: Optional[AgeGroup] = None
    city: Optional[str] = Field(None, max_length=120)


class BaptismUpdateRequest(WriteRequest):
    """Request to update a baptism; any status transition is accepted."""

    non_nullable = ("child_name", "status", "course_done", "docs_ok")

    child_name: Optional[str] = Field(None, min_length=1, max_length=200)
    parent_names: Optional[str] = Field(None, max_length=500)
    godparents_names: Optional[str] = Field(None, max_length=500)
    status: Optional[BaptismStatus] = None
    scheduled_date: Optional[date] = None
    celebrant_id: Optional[str] = None
    course_done: Optional[bool] = None
    docs_ok: Optional[bool] = None
    observations: Optional[str] = None
    gender: Optional[Gender] = None
    age_group: Optional[AgeGroup] = None
    city: Optional[str] = Field(None, max_length=120)


class BaptismResponse(BaseModel):
    """Response with baptism details."""

    id: int
    child_name: str
    parent_names: Optional[str]
    godparents_names: Optional[str]
    status: str
    scheduled_date: Optional[date]
    celebrant_id: Optional[str]
    course_done: bool
    docs_ok: bool
    observations: Optional[str]
    gender: Optional[str]
    age_group: Optional[AgeGroup]
    city: Optional[str]

    @classmethod
    def from_model(cls, baptism: Baptism) -> "BaptismResponse":
        return cls(
            id=baptism.id,
            child_name=baptism.child_name,
            parent_names=baptism.parent_names,
            godparents_names=baptism.godparents_names,
            status=baptism.status,
            scheduled_date=baptism.scheduled_date,
            celebrant_id=baptism.celebrant_id,
            course_done=bool(baptism.course_done),
            docs_ok=bool(baptism.docs_ok),
            observations=baptism.observations,
            gender=baptism.gender,
            age_group=baptism.age_group,
            city=baptism.city,
        )
