"""FundRaiser Donation Backend - Payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer, field_serializer

from src.models.transaction import TransactionStatus
from src.utils.helpers import format_utc_datetime

# Two-decimal currency string, no scientific notation
MoneyStr = Annotated[
    Decimal,
    PlainSerializer(lambda x: f"{x:.2f}", return_type=str),
]


class PaymentInitiateRequest(BaseModel):
    """Request to start a donation.

    ``amount`` is accepted loosely and validated by the payment service so
    that every malformed amount yields the same INVALID_AMOUNT error.
    """

    amount: Any = Field(default=None, description="Donation amount")


class PaymentInitiateResponse(BaseModel):
    """Response for a started donation."""

    success: bool = True
    message: str = "Payment initiated"
    gateway_url: str = Field(..., description="Gateway page to redirect the donor to")
    transaction_id: str


class TransactionResponse(BaseModel):
    """A donor's transaction."""

    transaction_id: str
    amount: MoneyStr
    currency: str
    status: TransactionStatus
    payment_method: str | None = None
    bank_transaction_id: str | None = None
    fail_reason: str | None = None
    created_at: datetime
    completed_at: datetime | None = None
    failed_at: datetime | None = None
    cancelled_at: datetime | None = None

    class Config:
        from_attributes = True

    @field_serializer("created_at", "completed_at", "failed_at", "cancelled_at")
    def _serialize_utc(self, value: datetime | None) -> str | None:
        return format_utc_datetime(value)
