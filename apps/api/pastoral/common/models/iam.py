"""Pastoral team members (local mirror of identity provider users)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, String, Text, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from pastoral.common.json_fields import load_json_list, load_json_object
from pastoral.common.models.base import Base, MemberStatusType, UserRoleType


class User(Base):
    """A pastoral member.

    ``id`` is the identity provider's user id, or ``manual_<hex>`` for members
    registered by staff without an account.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(191), primary_key=True)
    role: Mapped[str] = mapped_column(UserRoleType, nullable=False, default="MEMBER")
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    phone: Mapped[Optional[str]] = mapped_column(String(40))
    status: Mapped[str] = mapped_column(MemberStatusType, nullable=False, default="ativo")

    birth_date: Mapped[Optional[str]] = mapped_column(String(5))  # DD/MM
    address: Mapped[Optional[str]] = mapped_column(String(500))
    marital_status: Mapped[Optional[str]] = mapped_column(String(50))
    spouse_name: Mapped[Optional[str]] = mapped_column(String(200))
    wedding_date: Mapped[Optional[str]] = mapped_column(String(5))  # DD/MM
    has_children: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    children_data: Mapped[Optional[str]] = mapped_column(Text)
    sacraments: Mapped[Optional[str]] = mapped_column(Text)
    photo_url: Mapped[Optional[str]] = mapped_column(String(1000))

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    @property
    def children(self) -> list:
        return load_json_list(self.children_data)

    @property
    def sacrament_flags(self) -> dict:
        return load_json_object(self.sacraments)
