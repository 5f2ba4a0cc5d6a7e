"""Pydantic schemas for Finance module."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pastoral.common.models import FinanceTransaction, TransactionType
from pastoral.common.schemas import WriteRequest


class TransactionCreateRequest(BaseModel):
    """Request to record a cash entry or exit."""

    type: TransactionType
    value: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=500)
    date: dt.date
    category: Optional[str] = Field(None, max_length=100)


class TransactionUpdateRequest(WriteRequest):
    """Request to update a transaction."""

    non_nullable = ("type", "value", "description", "date")

    type: Optional[TransactionType] = None
    value: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    date: Optional[dt.date] = None
    category: Optional[str] = Field(None, max_length=100)


class TransactionResponse(BaseModel):
    """Response with transaction details."""

    id: int
    type: TransactionType
    value: Decimal
    description: str
    date: dt.date
    category: Optional[str]

    @classmethod
    def from_model(cls, tx: FinanceTransaction) -> "TransactionResponse":
        return cls(
            id=tx.id,
            type=tx.type,
            value=tx.value,
            description=tx.description,
            date=tx.date,
            category=tx.category,
        )
