"""Reconciliation Service - applies gateway-confirmed payments to the ledger.

A confirmed payment moves its transaction from ``initiated`` to ``completed``
and credits the owning donor, in one database transaction guarded by a
conditional update on ``status == initiated``. Replays, concurrent
deliveries and unknown transactions are acknowledged without any mutation.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.core.exceptions import PersistenceError
from src.models.transaction import Transaction, TransactionStatus
from src.models.user import User
from src.services.notifier import Notifier

logger = logging.getLogger(__name__)

AMOUNT_QUANTUM = Decimal("0.01")


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to currency precision."""
    return amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass
class ConfirmedPayment:
    """Payment details taken only from the gateway's verification response."""

    transaction_id: str
    amount: Decimal
    payer_email: str
    currency: str | None = None
    payment_method: str | None = None
    bank_transaction_id: str | None = None
    record: dict[str, Any] = field(default_factory=dict)


class ReconcileResult(str, Enum):
    """Outcome of applying a confirmed payment."""

    APPLIED = "applied"
    NOT_FOUND = "not_found"
    ALREADY_PROCESSED = "already_processed"
    AMOUNT_MISMATCH = "amount_mismatch"


class TransactionReconciler:
    """State machine applying confirmed payments exactly once."""

    def __init__(self, db: AsyncSession, notifier: Notifier | None = None) -> None:
        self.db = db
        self.notifier = notifier

    async def reconcile(self, confirmed: ConfirmedPayment) -> ReconcileResult:
        """Apply a gateway-confirmed payment.

        Args:
            confirmed: Verified payment details

        Returns:
            ReconcileResult

        Raises:
            PersistenceError: Database failure; nothing was applied
        """
        try:
            result, donor = await self._apply(confirmed)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Reconciliation of {confirmed.transaction_id} failed, rolled back: {e}")
            raise PersistenceError(
                "Failed to record payment",
                {"transaction_id": confirmed.transaction_id},
            ) from e

        if result == ReconcileResult.APPLIED and donor is not None:
            self._send_receipt(donor, confirmed)
        return result

    async def _apply(self, confirmed: ConfirmedPayment) -> tuple[ReconcileResult, User | None]:
        tran_id = confirmed.transaction_id

        result = await self.db.execute(
            select(Transaction).where(Transaction.transaction_id == tran_id)
        )
        transaction = result.scalar_one_or_none()
        if transaction is None:
            logger.warning(f"Confirmed payment for unknown transaction {tran_id} ignored")
            return ReconcileResult.NOT_FOUND, None

        if transaction.status.is_terminal:
            logger.info(f"Transaction {tran_id} already {transaction.status.value}, replay ignored")
            return ReconcileResult.ALREADY_PROCESSED, None

        # Exact comparison: a sub-cent delta is still a mismatch
        if transaction.amount != confirmed.amount:
            logger.error(
                f"Amount mismatch for {tran_id}: "
                f"local={transaction.amount} confirmed={confirmed.amount}"
            )
            return ReconcileResult.AMOUNT_MISMATCH, None
        if confirmed.currency and confirmed.currency.upper() != transaction.currency.upper():
            logger.error(
                f"Currency mismatch for {tran_id}: "
                f"local={transaction.currency} confirmed={confirmed.currency}"
            )
            return ReconcileResult.AMOUNT_MISMATCH, None
        amount = quantize_amount(transaction.amount)

        donor = await self.db.get(User, transaction.user_id)

        now = datetime.utcnow()
        completed = await self.db.execute(
            update(Transaction)
            .where(
                Transaction.transaction_id == tran_id,
                Transaction.status == TransactionStatus.INITIATED,
            )
            .values(
                status=TransactionStatus.COMPLETED,
                completed_at=now,
                validation=confirmed.record,
                payment_method=confirmed.payment_method,
                bank_transaction_id=confirmed.bank_transaction_id,
            )
            .execution_options(synchronize_session=False)
        )
        if completed.rowcount != 1:
            # Another delivery completed it between our read and this update
            await self.db.rollback()
            logger.info(f"Transaction {tran_id} completed concurrently, replay ignored")
            return ReconcileResult.ALREADY_PROCESSED, None

        await self.db.execute(
            update(User)
            .where(User.id == transaction.user_id)
            .values(donated_amount=User.donated_amount + amount, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        logger.info(
            f"Transaction {tran_id} completed: credited {amount} "
            f"{transaction.currency} to user {transaction.user_id}"
        )
        return ReconcileResult.APPLIED, donor

    def _send_receipt(self, donor: User, confirmed: ConfirmedPayment) -> None:
        if self.notifier is None:
            return
        try:
            sent = self.notifier.notify(
                donor.email,
                "donation_receipt",
                {
                    "first_name": donor.first_name,
                    "amount": str(quantize_amount(confirmed.amount)),
                    "currency": confirmed.currency or "BDT",
                    "transaction_id": confirmed.transaction_id,
                },
            )
        except Exception:
            logger.exception(f"Donation receipt for {confirmed.transaction_id} raised")
            sent = False
        if not sent:
            logger.warning(f"Donation receipt for {confirmed.transaction_id} not sent")
