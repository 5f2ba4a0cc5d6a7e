"""Baptism domain models (baptisms and the per-ceremony team scale)."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pastoral.common.models.base import (
    AgeGroup,
    Base,
    BaptismStatusType,
    GenderType,
    PresenceStatusType,
)


class Baptism(Base):
    """A baptism request, tracked from intake to the ceremony."""

    __tablename__ = "baptisms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    child_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    parent_names: Mapped[Optional[str]] = mapped_column(String(500))
    godparents_names: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[str] = mapped_column(
        BaptismStatusType, nullable=False, default="Solicitado", index=True
    )
    scheduled_date: Mapped[Optional[date]] = mapped_column(Date, index=True)
    celebrant_id: Mapped[Optional[str]] = mapped_column(
        String(191), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
    course_done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    docs_ok: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    observations: Mapped[Optional[str]] = mapped_column(Text)

    gender: Mapped[Optional[str]] = mapped_column(GenderType)
    # Legacy encoding: 0 = child, 1 = adult
    age_code: Mapped[Optional[int]] = mapped_column("age", Integer)
    city: Mapped[Optional[str]] = mapped_column(String(120))

    schedules: Mapped[list["Schedule"]] = relationship(
        back_populates="baptism",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Schedule.id",
    )

    @property
    def age_group(self) -> Optional[AgeGroup]:
        return AgeGroup.from_code(self.age_code)

    @age_group.setter
    def age_group(self, value: Optional[AgeGroup | str]) -> None:
        self.age_code = None if value is None else AgeGroup(value).code


class Schedule(Base):
    """Assignment of a pastoral member to one baptism ceremony."""

    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    baptism_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("baptisms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(191),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    role: Mapped[Optional[str]] = mapped_column(String(100))
    presence_status: Mapped[str] = mapped_column(
        PresenceStatusType, nullable=False, default="pendente"
    )

    baptism: Mapped[Baptism] = relationship(back_populates="schedules")

    __table_args__ = (
        UniqueConstraint("baptism_id", "user_id", name="uq_schedules_baptism_user"),
    )
