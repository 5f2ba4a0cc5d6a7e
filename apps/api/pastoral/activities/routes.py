"""Pastoral activities API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pastoral.activities import schemas
from pastoral.activities.service import (
    CommunicationService,
    EventService,
    FormationService,
    MeetingService,
    MemberRequestService,
)
from pastoral.auth.dependencies import get_current_user, require_staff
from pastoral.common.db import get_db
from pastoral.common.models import User

meetings_router = APIRouter(prefix="/meetings", tags=["meeting"])
events_router = APIRouter(prefix="/events", tags=["event"])
requests_router = APIRouter(prefix="/requests", tags=["request"])
formations_router = APIRouter(prefix="/formations", tags=["formation"])
communications_router = APIRouter(prefix="/communications", tags=["communication"])

routers = [
    meetings_router,
    events_router,
    requests_router,
    formations_router,
    communications_router,
]


# Meeting Routes
@meetings_router.get("", response_model=list[schemas.MeetingResponse])
async def list_meetings(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List meeting minutes, most recent first."""
    return [schemas.MeetingResponse.from_model(m) for m in MeetingService.list_meetings(db)]


@meetings_router.get("/{meeting_id}", response_model=schemas.MeetingResponse)
async def get_meeting(
    meeting_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.MeetingResponse.from_model(MeetingService.get_meeting(db, meeting_id))


@meetings_router.post(
    "", response_model=schemas.MeetingResponse, status_code=status.HTTP_201_CREATED
)
async def create_meeting(
    request: schemas.MeetingCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Record meeting minutes authored by the caller."""
    meeting = MeetingService.create_meeting(db, author_id=staff.id, **request.model_dump())
    return schemas.MeetingResponse.from_model(meeting)


@meetings_router.patch("/{meeting_id}", response_model=schemas.MeetingResponse)
async def update_meeting(
    meeting_id: int,
    request: schemas.MeetingUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    meeting = MeetingService.update_meeting(
        db, meeting_id, **request.changes()
    )
    return schemas.MeetingResponse.from_model(meeting)


@meetings_router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meeting(
    meeting_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    MeetingService.delete_meeting(db, meeting_id)


# Event Routes
@events_router.get("", response_model=list[schemas.EventResponse])
async def list_events(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List events in calendar order."""
    return [schemas.EventResponse.from_model(e) for e in EventService.list_events(db)]


@events_router.get("/{event_id}", response_model=schemas.EventResponse)
async def get_event(
    event_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.EventResponse.from_model(EventService.get_event(db, event_id))


@events_router.post("", response_model=schemas.EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: schemas.EventCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    event = EventService.create_event(db, **request.model_dump())
    return schemas.EventResponse.from_model(event)


@events_router.patch("/{event_id}", response_model=schemas.EventResponse)
async def update_event(
    event_id: int,
    request: schemas.EventUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    event = EventService.update_event(db, event_id, **request.changes())
    return schemas.EventResponse.from_model(event)


@events_router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    EventService.delete_event(db, event_id)


# Request Routes
@requests_router.get("", response_model=list[schemas.MemberRequestResponse])
async def list_requests(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List requests, newest first."""
    return [
        schemas.MemberRequestResponse.from_model(r)
        for r in MemberRequestService.list_requests(db)
    ]


@requests_router.get("/{request_id}", response_model=schemas.MemberRequestResponse)
async def get_request(
    request_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.MemberRequestResponse.from_model(
        MemberRequestService.get_request(db, request_id)
    )


@requests_router.post(
    "", response_model=schemas.MemberRequestResponse, status_code=status.HTTP_201_CREATED
)
async def create_request(
    request: schemas.MemberRequestCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Open a request in the caller's name. Any member may do this."""
    created = MemberRequestService.create_request(db, author_id=user.id, **request.model_dump())
    return schemas.MemberRequestResponse.from_model(created)


@requests_router.patch("/{request_id}", response_model=schemas.MemberRequestResponse)
async def update_request(
    request_id: int,
    request: schemas.MemberRequestUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    updated = MemberRequestService.update_request(
        db, request_id, **request.changes()
    )
    return schemas.MemberRequestResponse.from_model(updated)


@requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    MemberRequestService.delete_request(db, request_id)


# Formation Routes
@formations_router.get("", response_model=list[schemas.FormationResponse])
async def list_formations(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        schemas.FormationResponse.from_model(f) for f in FormationService.list_formations(db)
    ]


@formations_router.get("/{formation_id}", response_model=schemas.FormationResponse)
async def get_formation(
    formation_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.FormationResponse.from_model(
        FormationService.get_formation(db, formation_id)
    )


@formations_router.post(
    "", response_model=schemas.FormationResponse, status_code=status.HTTP_201_CREATED
)
async def create_formation(
    request: schemas.FormationCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    formation = FormationService.create_formation(db, **request.model_dump())
    return schemas.FormationResponse.from_model(formation)


@formations_router.patch("/{formation_id}", response_model=schemas.FormationResponse)
async def update_formation(
    formation_id: int,
    request: schemas.FormationUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    formation = FormationService.update_formation(
        db, formation_id, **request.changes()
    )
    return schemas.FormationResponse.from_model(formation)


@formations_router.delete("/{formation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_formation(
    formation_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    FormationService.delete_formation(db, formation_id)


# Communication Routes
@communications_router.get("", response_model=list[schemas.CommunicationResponse])
async def list_communications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        schemas.CommunicationResponse.from_model(c)
        for c in CommunicationService.list_communications(db)
    ]


@communications_router.get("/{communication_id}", response_model=schemas.CommunicationResponse)
async def get_communication(
    communication_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return schemas.CommunicationResponse.from_model(
        CommunicationService.get_communication(db, communication_id)
    )


@communications_router.post(
    "", response_model=schemas.CommunicationResponse, status_code=status.HTTP_201_CREATED
)
async def create_communication(
    request: schemas.CommunicationCreateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Publish a communication signed by the caller."""
    communication = CommunicationService.create_communication(
        db, author_id=staff.id, **request.model_dump()
    )
    return schemas.CommunicationResponse.from_model(communication)


@communications_router.patch(
    "/{communication_id}", response_model=schemas.CommunicationResponse
)
async def update_communication(
    communication_id: int,
    request: schemas.CommunicationUpdateRequest,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    communication = CommunicationService.update_communication(
        db, communication_id, **request.changes()
    )
    return schemas.CommunicationResponse.from_model(communication)


@communications_router.delete("/{communication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_communication(
    communication_id: int,
    staff: User = Depends(require_staff),
    db: Session = Depends(get_db),
):
    CommunicationService.delete_communication(db, communication_id)
