"""FundRaiser Donation Backend - Donation transaction model."""

import secrets
import time
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from src.models.user import User


class TransactionStatus(str, Enum):
    """Transaction status.

    State transitions:
    - initiated -> completed (trusted IPN path only)
    - initiated -> failed / cancelled (browser redirect)

    Terminal states are final.
    """

    INITIATED = "initiated"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self != TransactionStatus.INITIATED


def generate_transaction_id() -> str:
    """Generate a unique, time-sortable transaction ID.

    Format: TR + timestamp_ms + random_hex(10)
    - TR1702345678000ABC123DEF0
    """
    timestamp = int(time.time() * 1000)
    random_suffix = secrets.token_hex(5).upper()
    return f"TR{timestamp}{random_suffix}"


class Transaction(SQLModel, table=True):
    """Donation transaction model.

    Append-only: rows are created in ``initiated`` state by the payment
    initiator and move exactly once to a terminal state.

    Attributes:
        id: Auto-increment primary key
        transaction_id: System-generated unique transaction ID (sent to the gateway as tran_id)
        user_id: Owning donor
        amount: Donation amount, fixed at creation
        currency: Currency code, fixed at creation
        status: Lifecycle status
        payment_method: Card/wallet type reported by the gateway
        bank_transaction_id: Bank reference reported by the gateway
        fail_reason: Gateway-reported failure reason
        validation: Gateway verification payload (completed only)
    """

    __tablename__ = "transactions"

    id: int | None = Field(default=None, primary_key=True)
    transaction_id: str = Field(
        max_length=64,
        unique=True,
        index=True,
        description="System transaction ID (TR prefix)",
    )
    user_id: int = Field(foreign_key="users.id", index=True)

    amount: Decimal = Field(
        sa_column=sa.Column(sa.DECIMAL(32, 2), nullable=False),
        description="Donation amount",
    )
    currency: str = Field(default="BDT", max_length=8)
    status: TransactionStatus = Field(
        default=TransactionStatus.INITIATED,
        index=True,
        description="Transaction status",
    )

    # Gateway details
    payment_method: str | None = Field(default=None, max_length=64)
    bank_transaction_id: str | None = Field(default=None, max_length=128)
    fail_reason: str | None = Field(default=None, max_length=500)
    validation: dict[str, Any] | None = Field(
        default=None,
        sa_column=sa.Column(sa.JSON, nullable=True),
        description="Gateway verification record",
    )

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = Field(default=None)
    failed_at: datetime | None = Field(default=None)
    cancelled_at: datetime | None = Field(default=None)

    user: Optional["User"] = Relationship(back_populates="transactions")
