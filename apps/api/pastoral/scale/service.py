"""Ceremony team scale and presence confirmation.

Presence moves ``pendente`` -> ``confirmado`` | ``ausente``. Only staff may put
an answered assignment back to ``pendente``, and an answer is never flipped
directly; it has to be reset first.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import STAFF_ROLES, has_role
from pastoral.common.models import Baptism, PresenceStatus, Schedule, User
from pastoral.core.errors import ConflictError, ForbiddenError, NotFoundError
from pastoral.core.metrics import emit_business_metric

logger = logging.getLogger(__name__)

ALREADY_SCALED_MSG = "Este membro já está na escala deste batismo"
RESET_FIRST_MSG = "Volte a presença para pendente antes de alterá-la"


class ScaleService:
    """Service for baptism team assignments."""

    @staticmethod
    def get_schedule(db: Session, schedule_id: int) -> Schedule:
        schedule = db.get(Schedule, schedule_id)
        if not schedule:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    @staticmethod
    def find_assignment(db: Session, baptism_id: int, user_id: str) -> Optional[Schedule]:
        stmt = select(Schedule).where(
            Schedule.baptism_id == baptism_id,
            Schedule.user_id == user_id,
        )
        return db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def add_to_scale(
        db: Session,
        baptism_id: int,
        user_id: str,
        role: Optional[str] = None,
    ) -> Schedule:
        """Assign a member to a baptism in ``pendente`` state.

        Raises:
            NotFoundError: Unknown baptism or member
            ConflictError: The member is already on this baptism's team
        """
        if db.get(Baptism, baptism_id) is None:
            raise NotFoundError("Baptism", baptism_id)
        if db.get(User, user_id) is None:
            raise NotFoundError("Member", user_id)
        if ScaleService.find_assignment(db, baptism_id, user_id) is not None:
            raise ConflictError(
                ALREADY_SCALED_MSG, details={"baptism_id": baptism_id, "user_id": user_id}
            )

        schedule = Schedule(
            baptism_id=baptism_id,
            user_id=user_id,
            role=role,
            presence_status=PresenceStatus.PENDENTE.value,
        )
        db.add(schedule)
        try:
            db.commit()
        except IntegrityError as e:
            # Lost a race against the same assignment
            db.rollback()
            raise ConflictError(
                ALREADY_SCALED_MSG, details={"baptism_id": baptism_id, "user_id": user_id}
            ) from e

        db.refresh(schedule)
        logger.info("Scaled member %s on baptism %s as %s", user_id, baptism_id, role)
        emit_business_metric("scale.member_added", baptism_id=str(baptism_id))
        return schedule

    @staticmethod
    def remove_from_scale(db: Session, schedule_id: int) -> None:
        schedule = ScaleService.get_schedule(db, schedule_id)
        baptism_id = schedule.baptism_id
        db.delete(schedule)
        db.commit()
        logger.info("Removed schedule %s from baptism %s", schedule_id, baptism_id)
        emit_business_metric("scale.member_removed", baptism_id=str(baptism_id))

    @staticmethod
    def check_transition(
        actor: User,
        schedule: Schedule,
        target: PresenceStatus,
    ) -> None:
        """Raise unless ``actor`` may move ``schedule`` to ``target``."""
        current = PresenceStatus(schedule.presence_status)
        is_staff = has_role(actor, STAFF_ROLES)

        if current is PresenceStatus.PENDENTE:
            if actor.id != schedule.user_id and not is_staff:
                raise ForbiddenError()
            return

        if target is PresenceStatus.PENDENTE:
            if not is_staff:
                raise ForbiddenError()
            return

        raise ConflictError(
            RESET_FIRST_MSG,
            details={"from": current.value, "to": target.value},
        )

    @staticmethod
    def update_presence_status(
        db: Session,
        actor: User,
        schedule_id: int,
        status: PresenceStatus,
    ) -> Schedule:
        schedule = ScaleService.get_schedule(db, schedule_id)
        target = PresenceStatus(status)

        if schedule.presence_status == target.value:
            return schedule

        ScaleService.check_transition(actor, schedule, target)

        previous = schedule.presence_status
        schedule.presence_status = target.value
        db.commit()
        db.refresh(schedule)

        logger.info(
            "Presence of schedule %s changed %s -> %s by %s",
            schedule_id,
            previous,
            target.value,
            actor.id,
        )
        emit_business_metric("scale.presence_updated", status=target.value)
        return schedule
