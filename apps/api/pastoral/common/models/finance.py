"""Finance domain models."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pastoral.common.models.base import Base, TransactionTypeType


class FinanceTransaction(Base):
    """A single cash entry (``entrada``) or exit (``saída``)."""

    __tablename__ = "finance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(TransactionTypeType, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100))
