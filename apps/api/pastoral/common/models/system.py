"""System models (uploaded files registry and key-value settings)."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Integer, String, Text, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from pastoral.common.models.base import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Upload(Base):
    """A shared file (template, guide, manual) kept in the blob store."""

    __tablename__ = "uploads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    filename: Mapped[str] = mapped_column(String(300), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="Template")
    created_at: Mapped[dt.datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=_utcnow
    )


class Config(Base):
    """Singleton application settings (e.g. ``annual_goal``)."""

    __tablename__ = "configs"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow
    )
