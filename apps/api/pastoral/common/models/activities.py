"""Pastoral activity models (meetings, events, requests, formations, communications)."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from pastoral.common.models.base import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Meeting(Base):
    """Meeting minutes (``atas``)."""

    __tablename__ = "minutes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meeting_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    meeting_time: Mapped[Optional[str]] = mapped_column(String(5))  # HH:MM
    title: Mapped[Optional[str]] = mapped_column(String(200))
    type: Mapped[Optional[str]] = mapped_column(String(50))
    responsible_id: Mapped[Optional[str]] = mapped_column(
        String(191), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
    location: Mapped[Optional[str]] = mapped_column(String(300))
    content: Mapped[Optional[str]] = mapped_column(Text)
    file_url: Mapped[Optional[str]] = mapped_column(String(1000))
    author_id: Mapped[str] = mapped_column(
        String(191), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    time: Mapped[Optional[str]] = mapped_column(String(5))
    location: Mapped[Optional[str]] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="Agendado")


class MemberRequest(Base):
    """A request, idea, purchase or task raised by a member."""

    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    urgency: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="Pendente", index=True
    )
    author_id: Mapped[Optional[str]] = mapped_column(
        String(191), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=_utcnow
    )


class Formation(Base):
    __tablename__ = "formations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    facilitator: Mapped[Optional[str]] = mapped_column(String(200))
    content: Mapped[Optional[str]] = mapped_column(Text)
    file_url: Mapped[Optional[str]] = mapped_column(String(1000))


class Communication(Base):
    __tablename__ = "communications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(String(1000))
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    author_id: Mapped[Optional[str]] = mapped_column(
        String(191), ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )
