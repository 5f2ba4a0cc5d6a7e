"""Baptisms service layer."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pastoral.common.models import Baptism, User
from pastoral.core.errors import NotFoundError

logger = logging.getLogger(__name__)


def _apply_fields(baptism: Baptism, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        if key == "age_group":
            baptism.age_group = value
        elif key in ("status", "gender"):
            setattr(baptism, key, getattr(value, "value", value))
        elif key == "city":
            baptism.city = value.strip() if value else value
        else:
            setattr(baptism, key, value)


class BaptismService:
    """Service for managing baptisms."""

    @staticmethod
    def _check_celebrant(db: Session, celebrant_id: Optional[str]) -> None:
        if celebrant_id and db.get(User, celebrant_id) is None:
            raise NotFoundError("Member", celebrant_id)

    @staticmethod
    def list_baptisms(db: Session) -> list[Baptism]:
        stmt = select(Baptism).order_by(Baptism.id.desc())
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def list_agenda(
        db: Session,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Baptism]:
        """Dated baptisms in ceremony order."""
        stmt = select(Baptism).where(Baptism.scheduled_date.is_not(None))
        if date_from:
            stmt = stmt.where(Baptism.scheduled_date >= date_from)
        if date_to:
            stmt = stmt.where(Baptism.scheduled_date <= date_to)
        stmt = stmt.order_by(Baptism.scheduled_date, Baptism.id)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_baptism(db: Session, baptism_id: int) -> Baptism:
        baptism = db.get(Baptism, baptism_id)
        if not baptism:
            raise NotFoundError("Baptism", baptism_id)
        return baptism

    @staticmethod
    def create_baptism(db: Session, **fields: Any) -> Baptism:
        BaptismService._check_celebrant(db, fields.get("celebrant_id"))

        baptism = Baptism()
        _apply_fields(baptism, fields)
        db.add(baptism)
        db.commit()
        db.refresh(baptism)
        logger.info("Created baptism %s (%s)", baptism.id, baptism.status)
        return baptism

    @staticmethod
    def update_baptism(db: Session, baptism_id: int, **updates: Any) -> Baptism:
        baptism = BaptismService.get_baptism(db, baptism_id)
        if "celebrant_id" in updates:
            BaptismService._check_celebrant(db, updates["celebrant_id"])

        _apply_fields(baptism, updates)
        db.commit()
        db.refresh(baptism)
        return baptism

    @staticmethod
    def delete_baptism(db: Session, baptism_id: int) -> None:
        """Delete a baptism together with its scale."""
        baptism = BaptismService.get_baptism(db, baptism_id)
        db.delete(baptism)
        db.commit()
        logger.info("Deleted baptism %s", baptism_id)
