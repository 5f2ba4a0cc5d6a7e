"""Finance API routes."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pastoral.auth.dependencies import get_current_user, require_finance
from pastoral.common.db import get_db
from pastoral.common.models import TransactionType, User
from pastoral.core.metrics import emit_business_metric
from pastoral.finance import schemas
from pastoral.finance.service import FinanceTransactionService

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/transactions", response_model=list[schemas.TransactionResponse])
async def list_transactions(
    type: Optional[TransactionType] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List transactions with optional filters."""
    transactions = FinanceTransactionService.list_transactions(
        db,
        tx_type=type.value if type else None,
        date_from=date_from,
        date_to=date_to,
    )
    return [schemas.TransactionResponse.from_model(tx) for tx in transactions]


@router.get("/transactions/{transaction_id}", response_model=schemas.TransactionResponse)
async def get_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a transaction by ID."""
    tx = FinanceTransactionService.get_transaction(db, transaction_id)
    return schemas.TransactionResponse.from_model(tx)


@router.post(
    "/transactions",
    response_model=schemas.TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    request: schemas.TransactionCreateRequest,
    user: User = Depends(require_finance),
    db: Session = Depends(get_db),
):
    """Record a new transaction."""
    tx = FinanceTransactionService.create_transaction(
        db, actor_id=user.id, **request.model_dump()
    )

    emit_business_metric("finance.transaction_recorded", type=tx.type)

    return schemas.TransactionResponse.from_model(tx)


@router.patch("/transactions/{transaction_id}", response_model=schemas.TransactionResponse)
async def update_transaction(
    transaction_id: int,
    request: schemas.TransactionUpdateRequest,
    user: User = Depends(require_finance),
    db: Session = Depends(get_db),
):
    """Update a transaction."""
    tx = FinanceTransactionService.update_transaction(
        db, transaction_id, **request.changes()
    )
    return schemas.TransactionResponse.from_model(tx)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    user: User = Depends(require_finance),
    db: Session = Depends(get_db),
):
    """Delete a transaction."""
    FinanceTransactionService.delete_transaction(db, transaction_id)
