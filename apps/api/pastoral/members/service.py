"""Pastoral members service layer."""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import uuid4

import phonenumbers
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pastoral.common.json_fields import dump_json
from pastoral.common.models import (
    Baptism,
    Communication,
    Meeting,
    MemberRequest,
    Schedule,
    User,
)
from pastoral.core.config import settings
from pastoral.core.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

MEMBER_IN_USE_MSG = (
    "Não é possível excluir este membro: existem escalas, atas, pedidos ou "
    "batismos vinculados a ele. Inative o cadastro em vez de excluir."
)

# Fields whose pydantic value must be serialized before hitting the row
_JSON_FIELDS = {"children": "children_data", "sacraments": "sacraments"}


def normalize_phone(raw: Optional[str], region: Optional[str] = None) -> Optional[str]:
    """Return the E.164 form of a phone number, or the trimmed input if unparseable."""
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        parsed = phonenumbers.parse(text, region or settings.default_phone_region)
    except phonenumbers.NumberParseException:
        return text
    if not phonenumbers.is_valid_number(parsed):
        return text
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def _apply_fields(user: User, fields: dict[str, Any]) -> None:
    for key, value in fields.items():
        if key in _JSON_FIELDS:
            setattr(user, _JSON_FIELDS[key], dump_json(value))
        elif key == "phone":
            user.phone = normalize_phone(value)
        elif key == "email":
            user.email = value or ""
        elif key in ("role", "status") and value is not None:
            setattr(user, key, getattr(value, "value", value))
        elif hasattr(user, key):
            setattr(user, key, value)


class MemberService:
    """Service for managing pastoral members."""

    @staticmethod
    def list_members(db: Session, status: Optional[str] = None) -> list[User]:
        stmt = select(User)
        if status:
            stmt = stmt.where(User.status == status)
        stmt = stmt.order_by(User.name, User.id)
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_member(db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise NotFoundError("Member", user_id)
        return user

    @staticmethod
    def create_member(db: Session, **fields: Any) -> User:
        """Register a member that has no identity provider account yet."""
        user = User(id=f"manual_{uuid4().hex}", name=fields.pop("name"), email="")
        _apply_fields(user, fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Registered member %s", user.id)
        return user

    @staticmethod
    def update_member(db: Session, user_id: str, **updates: Any) -> User:
        """Apply only the supplied fields."""
        user = MemberService.get_member(db, user_id)
        _apply_fields(user, updates)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def count_dependents(db: Session, user_id: str) -> int:
        checks = [
            select(func.count()).select_from(Schedule).where(Schedule.user_id == user_id),
            select(func.count()).select_from(Meeting).where(
                or_(Meeting.author_id == user_id, Meeting.responsible_id == user_id)
            ),
            select(func.count())
            .select_from(MemberRequest)
            .where(MemberRequest.author_id == user_id),
            select(func.count())
            .select_from(Communication)
            .where(Communication.author_id == user_id),
            select(func.count()).select_from(Baptism).where(Baptism.celebrant_id == user_id),
        ]
        return sum(db.execute(stmt).scalar() or 0 for stmt in checks)

    @staticmethod
    def delete_member(db: Session, user_id: str) -> None:
        """Hard-delete a member that nothing references.

        The check and the delete share one transaction; the foreign keys catch
        a dependent row inserted in between.
        """
        user = MemberService.get_member(db, user_id)

        dependents = MemberService.count_dependents(db, user_id)
        if dependents:
            db.rollback()
            raise ConflictError(
                MEMBER_IN_USE_MSG, details={"member_id": user_id, "dependents": dependents}
            )

        db.delete(user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(MEMBER_IN_USE_MSG, details={"member_id": user_id}) from e
        logger.info("Deleted member %s", user_id)
