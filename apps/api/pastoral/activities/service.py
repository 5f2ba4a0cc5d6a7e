"""Pastoral activities service layer."""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pastoral.common.models import (
    Base,
    Communication,
    Event,
    Formation,
    Meeting,
    MemberRequest,
    User,
)
from pastoral.core.errors import NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

OPEN_REQUEST_STATUSES = ("Pendente", "Em Andamento")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _get_or_404(db: Session, model: type[ModelT], resource: str, row_id: int) -> ModelT:
    row = db.get(model, row_id)
    if not row:
        raise NotFoundError(resource, row_id)
    return row


def _insert(db: Session, row: ModelT) -> ModelT:
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _update(db: Session, row: ModelT, updates: dict[str, Any]) -> ModelT:
    for key, value in updates.items():
        setattr(row, key, _enum_value(value))
    db.commit()
    db.refresh(row)
    return row


def _delete(db: Session, row: Base) -> None:
    db.delete(row)
    db.commit()


def _check_member(db: Session, user_id: Optional[str]) -> None:
    if user_id and db.get(User, user_id) is None:
        raise NotFoundError("Member", user_id)


class MeetingService:
    """Service for meeting minutes."""

    @staticmethod
    def list_meetings(db: Session) -> list[Meeting]:
        stmt = select(Meeting).order_by(Meeting.meeting_date.desc(), Meeting.id.desc())
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_meeting(db: Session, meeting_id: int) -> Meeting:
        return _get_or_404(db, Meeting, "Meeting", meeting_id)

    @staticmethod
    def create_meeting(db: Session, author_id: str, **fields: Any) -> Meeting:
        _check_member(db, fields.get("responsible_id"))
        meeting = _insert(db, Meeting(author_id=author_id, **fields))
        logger.info("Created meeting %s by %s", meeting.id, author_id)
        return meeting

    @staticmethod
    def update_meeting(db: Session, meeting_id: int, **updates: Any) -> Meeting:
        meeting = MeetingService.get_meeting(db, meeting_id)
        if "responsible_id" in updates:
            _check_member(db, updates["responsible_id"])
        return _update(db, meeting, updates)

    @staticmethod
    def delete_meeting(db: Session, meeting_id: int) -> None:
        _delete(db, MeetingService.get_meeting(db, meeting_id))


class EventService:
    @staticmethod
    def list_events(db: Session) -> list[Event]:
        stmt = select(Event).order_by(Event.date, Event.id)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_event(db: Session, event_id: int) -> Event:
        return _get_or_404(db, Event, "Event", event_id)

    @staticmethod
    def create_event(db: Session, **fields: Any) -> Event:
        return _insert(db, Event(**fields))

    @staticmethod
    def update_event(db: Session, event_id: int, **updates: Any) -> Event:
        return _update(db, EventService.get_event(db, event_id), updates)

    @staticmethod
    def delete_event(db: Session, event_id: int) -> None:
        _delete(db, EventService.get_event(db, event_id))


class MemberRequestService:
    """Service for member requests (pedidos, ideias, compras, tarefas)."""

    @staticmethod
    def list_requests(db: Session) -> list[MemberRequest]:
        stmt = select(MemberRequest).order_by(
            MemberRequest.created_at.desc(), MemberRequest.id.desc()
        )
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def count_open(db: Session) -> int:
        """Requests still waiting for an answer (dashboard notifications)."""
        stmt = (
            select(func.count())
            .select_from(MemberRequest)
            .where(MemberRequest.status.in_(OPEN_REQUEST_STATUSES))
        )
        return db.execute(stmt).scalar() or 0

    @staticmethod
    def get_request(db: Session, request_id: int) -> MemberRequest:
        return _get_or_404(db, MemberRequest, "Request", request_id)

    @staticmethod
    def create_request(db: Session, author_id: str, **fields: Any) -> MemberRequest:
        row = MemberRequest(
            author_id=author_id,
            **{key: _enum_value(value) for key, value in fields.items()},
        )
        request = _insert(db, row)
        logger.info("Member %s opened request %s (%s)", author_id, request.id, request.type)
        return request

    @staticmethod
    def update_request(db: Session, request_id: int, **updates: Any) -> MemberRequest:
        return _update(db, MemberRequestService.get_request(db, request_id), updates)

    @staticmethod
    def delete_request(db: Session, request_id: int) -> None:
        _delete(db, MemberRequestService.get_request(db, request_id))


class FormationService:
    @staticmethod
    def list_formations(db: Session) -> list[Formation]:
        stmt = select(Formation).order_by(Formation.date.desc(), Formation.id.desc())
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_formation(db: Session, formation_id: int) -> Formation:
        return _get_or_404(db, Formation, "Formation", formation_id)

    @staticmethod
    def create_formation(db: Session, **fields: Any) -> Formation:
        return _insert(db, Formation(**fields))

    @staticmethod
    def update_formation(db: Session, formation_id: int, **updates: Any) -> Formation:
        return _update(db, FormationService.get_formation(db, formation_id), updates)

    @staticmethod
    def delete_formation(db: Session, formation_id: int) -> None:
        _delete(db, FormationService.get_formation(db, formation_id))


class CommunicationService:
    @staticmethod
    def list_communications(db: Session) -> list[Communication]:
        stmt = select(Communication).order_by(
            Communication.date.desc(), Communication.id.desc()
        )
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_communication(db: Session, communication_id: int) -> Communication:
        return _get_or_404(db, Communication, "Communication", communication_id)

    @staticmethod
    def create_communication(db: Session, author_id: str, **fields: Any) -> Communication:
        return _insert(db, Communication(author_id=author_id, **fields))

    @staticmethod
    def update_communication(
        db: Session, communication_id: int, **updates: Any
    ) -> Communication:
        return _update(
            db, CommunicationService.get_communication(db, communication_id), updates
        )

    @staticmethod
    def delete_communication(db: Session, communication_id: int) -> None:
        _delete(db, CommunicationService.get_communication(db, communication_id))
