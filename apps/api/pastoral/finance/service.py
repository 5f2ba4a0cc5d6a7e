"""Finance service layer."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pastoral.common.models import FinanceTransaction
from pastoral.core.errors import NotFoundError

logger = logging.getLogger(__name__)


class FinanceTransactionService:
    """Service for managing finance transactions."""

    @staticmethod
    def list_transactions(
        db: Session,
        tx_type: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[FinanceTransaction]:
        """List transactions, most recent first."""
        stmt = select(FinanceTransaction)
        if tx_type:
            stmt = stmt.where(FinanceTransaction.type == tx_type)
        if date_from:
            stmt = stmt.where(FinanceTransaction.date >= date_from)
        if date_to:
            stmt = stmt.where(FinanceTransaction.date <= date_to)
        stmt = stmt.order_by(FinanceTransaction.date.desc(), FinanceTransaction.id.desc())
        return list(db.execute(stmt).scalars().all())

    @staticmethod
    def get_transaction(db: Session, transaction_id: int) -> FinanceTransaction:
        tx = db.get(FinanceTransaction, transaction_id)
        if not tx:
            raise NotFoundError("Transaction", transaction_id)
        return tx

    @staticmethod
    def create_transaction(db: Session, actor_id: str, **fields: Any) -> FinanceTransaction:
        fields["type"] = getattr(fields["type"], "value", fields["type"])
        tx = FinanceTransaction(**fields)
        db.add(tx)
        db.commit()
        db.refresh(tx)
        logger.info(
            "Transaction %s recorded by %s: %s %s", tx.id, actor_id, tx.type, tx.value
        )
        return tx

    @staticmethod
    def update_transaction(
        db: Session, transaction_id: int, **updates: Any
    ) -> FinanceTransaction:
        tx = FinanceTransactionService.get_transaction(db, transaction_id)
        for key, value in updates.items():
            setattr(tx, key, getattr(value, "value", value))
        db.commit()
        db.refresh(tx)
        return tx

    @staticmethod
    def delete_transaction(db: Session, transaction_id: int) -> None:
        tx = FinanceTransactionService.get_transaction(db, transaction_id)
        db.delete(tx)
        db.commit()
        logger.info("Transaction %s deleted", transaction_id)
