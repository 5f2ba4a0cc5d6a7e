"""Pydantic schemas for pastoral activities (meetings, events, requests, formations, communications)."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from pastoral.common.models import (
    Communication,
    Event,
    Formation,
    Meeting,
    MemberRequest,
    RequestType,
    Urgency,
)
from pastoral.common.schemas import WriteRequest

TIME_PATTERN = r"^\d{2}:\d{2}$"


# Meeting Schemas
class MeetingCreateRequest(BaseModel):
    meeting_date: dt.date
    meeting_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    title: Optional[str] = Field(None, max_length=200)
    type: Optional[str] = Field(None, max_length=50)
    responsible_id: Optional[str] = None
    location: Optional[str] = Field(None, max_length=300)
    content: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=1000)


class MeetingUpdateRequest(WriteRequest):
    non_nullable = ("meeting_date",)

    meeting_date: Optional[dt.date] = None
    meeting_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    title: Optional[str] = Field(None, max_length=200)
    type: Optional[str] = Field(None, max_length=50)
    responsible_id: Optional[str] = None
    location: Optional[str] = Field(None, max_length=300)
    content: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=1000)


class MeetingResponse(BaseModel):
    id: int
    meeting_date: dt.date
    meeting_time: Optional[str]
    title: Optional[str]
    type: Optional[str]
    responsible_id: Optional[str]
    location: Optional[str]
    content: Optional[str]
    file_url: Optional[str]
    author_id: str

    @classmethod
    def from_model(cls, meeting: Meeting) -> "MeetingResponse":
        return cls(
            id=meeting.id,
            meeting_date=meeting.meeting_date,
            meeting_time=meeting.meeting_time,
            title=meeting.title,
            type=meeting.type,
            responsible_id=meeting.responsible_id,
            location=meeting.location,
            content=meeting.content,
            file_url=meeting.file_url,
            author_id=meeting.author_id,
        )


# Event Schemas
class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: dt.date
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    location: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    status: str = Field("Agendado", max_length=50)


class EventUpdateRequest(WriteRequest):
    non_nullable = ("title", "date", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    location: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    status: Optional[str] = Field(None, max_length=50)


class EventResponse(BaseModel):
    id: int
    title: str
    date: dt.date
    time: Optional[str]
    location: Optional[str]
    description: Optional[str]
    status: str

    @classmethod
    def from_model(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            date=event.date,
            time=event.time,
            location=event.location,
            description=event.description,
            status=event.status,
        )


# Request Schemas
class MemberRequestCreateRequest(BaseModel):
    """A request, idea, purchase or task; the author is the caller."""

    title: str = Field(..., min_length=1, max_length=200)
    type: RequestType
    urgency: Urgency = Urgency.MEDIUM
    description: Optional[str] = None


class MemberRequestUpdateRequest(WriteRequest):
    non_nullable = ("title", "type", "urgency", "status")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[RequestType] = None
    urgency: Optional[Urgency] = None
    description: Optional[str] = None
    status: Optional[str] = Field(None, max_length=50)


class MemberRequestResponse(BaseModel):
    id: int
    title: str
    type: str
    urgency: str
    description: Optional[str]
    status: str
    author_id: Optional[str]
    created_at: Optional[dt.datetime]

    @classmethod
    def from_model(cls, request: MemberRequest) -> "MemberRequestResponse":
        return cls(
            id=request.id,
            title=request.title,
            type=request.type,
            urgency=request.urgency,
            description=request.description,
            status=request.status,
            author_id=request.author_id,
            created_at=request.created_at,
        )


# Formation Schemas
class FormationCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: dt.date
    facilitator: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=1000)


class FormationUpdateRequest(WriteRequest):
    non_nullable = ("title", "date")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[dt.date] = None
    facilitator: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=1000)


class FormationResponse(BaseModel):
    id: int
    title: str
    date: dt.date
    facilitator: Optional[str]
    content: Optional[str]
    file_url: Optional[str]

    @classmethod
    def from_model(cls, formation: Formation) -> "FormationResponse":
        return cls(
            id=formation.id,
            title=formation.title,
            date=formation.date,
            facilitator=formation.facilitator,
            content=formation.content,
            file_url=formation.file_url,
        )


# Communication Schemas
class CommunicationCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    file_url: Optional[str] = Field(None, max_length=1000)
    date: dt.date


class CommunicationUpdateRequest(WriteRequest):
    non_nullable = ("title", "content", "date")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    file_url: Optional[str] = Field(None, max_length=1000)
    date: Optional[dt.date] = None


class CommunicationResponse(BaseModel):
    id: int
    title: str
    content: str
    file_url: Optional[str]
    date: dt.date
    author_id: Optional[str]

    @classmethod
    def from_model(cls, communication: Communication) -> "CommunicationResponse":
        return cls(
            id=communication.id,
            title=communication.title,
            content=communication.content,
            file_url=communication.file_url,
            date=communication.date,
            author_id=communication.author_id,
        )
