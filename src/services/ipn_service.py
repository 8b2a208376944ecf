"""IPN Service - validation and processing of gateway notifications.

Inbound notifications are untrusted. Only the lookup fields (tran_id,
amount, val_id) are read from them; everything that reaches the ledger is
re-derived from the gateway's verification endpoint.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.core.exceptions import ErrorSeverity, NotificationRejectedError, RejectionReason
from src.gateway.base import PaymentGateway
from src.services.reconciliation_service import (
    ConfirmedPayment,
    ReconcileResult,
    TransactionReconciler,
)

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


@dataclass
class IPNNotification:
    """Raw notification as posted by the gateway."""

    tran_id: str | None
    amount: str | None
    val_id: str | None
    status: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IPNNotification":
        def _get(key: str) -> str | None:
            value = payload.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return cls(
            tran_id=_get("tran_id"),
            amount=_get("amount"),
            val_id=_get("val_id"),
            status=_get("status"),
        )


class IPNOutcome(str, Enum):
    """Result reported back to the gateway."""

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    REJECTED = "rejected"


@dataclass
class IPNResult:
    outcome: IPNOutcome
    message: str


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


class NotificationValidator:
    """Re-confirms inbound notifications with the gateway."""

    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    async def validate(self, notification: IPNNotification) -> ConfirmedPayment:
        """Validate a notification against the gateway's own record.

        Returns:
            ConfirmedPayment built from the verification response

        Raises:
            NotificationRejectedError: Policy rejection (acknowledge, do not retry)
            GatewayUnavailableError: Verification could not be performed (retry)
        """
        missing = [
            name
            for name in ("tran_id", "amount", "val_id")
            if not getattr(notification, name)
        ]
        if missing:
            raise NotificationRejectedError(
                RejectionReason.MISSING_FIELDS,
                "invalid IPN data",
                {"missing": missing, "tran_id": notification.tran_id},
            )

        try:
            claimed_amount = Decimal(notification.amount)
        except InvalidOperation:
            claimed_amount = None
        if claimed_amount is None or not claimed_amount.is_finite():
            raise NotificationRejectedError(
                RejectionReason.MISSING_FIELDS,
                "invalid IPN amount",
                {"tran_id": notification.tran_id, "amount": notification.amount},
            )

        verification = await self.gateway.verify(notification.val_id)

        if not verification.is_confirmed:
            raise NotificationRejectedError(
                RejectionReason.UNCONFIRMED,
                "transaction not valid",
                {"tran_id": notification.tran_id, "status": verification.status},
            )

        if (
            verification.transaction_id != notification.tran_id
            or verification.amount is None
            or verification.amount != claimed_amount
        ):
            raise NotificationRejectedError(
                RejectionReason.MISMATCH,
                "transaction details mismatch",
                {
                    "claimed_tran_id": notification.tran_id,
                    "confirmed_tran_id": verification.transaction_id,
                    "claimed_amount": str(claimed_amount),
                    "confirmed_amount": str(verification.amount),
                },
            )

        if not is_valid_email(verification.payer_email):
            raise NotificationRejectedError(
                RejectionReason.INVALID_PAYER,
                "invalid payer contact",
                {"tran_id": notification.tran_id},
            )

        return ConfirmedPayment(
            transaction_id=verification.transaction_id,
            amount=verification.amount,
            payer_email=verification.payer_email.lower(),
            currency=verification.currency,
            payment_method=verification.card_type,
            bank_transaction_id=verification.bank_transaction_id,
            record=verification.raw,
        )


class NotificationService:
    """Validates an IPN and hands it to the reconciler."""

    def __init__(self, validator: NotificationValidator, reconciler: TransactionReconciler) -> None:
        self.validator = validator
        self.reconciler = reconciler

    async def process(self, notification: IPNNotification) -> IPNResult:
        """Process one notification.

        Policy rejections and unresolvable records come back as results;
        transient failures (gateway, database) propagate so the caller can
        ask the gateway to retry.
        """
        logger.info(
            f"IPN received: tran_id={notification.tran_id} "
            f"val_id={notification.val_id} status={notification.status}"
        )

        try:
            confirmed = await self.validator.validate(notification)
        except NotificationRejectedError as e:
            level = logging.ERROR if e.severity == ErrorSeverity.ERROR else logging.WARNING
            logger.log(level, f"IPN rejected ({e.reason.value}): {e.message} {e.details}")
            return IPNResult(IPNOutcome.REJECTED, f"IPN handled, but {e.message}.")

        result = await self.reconciler.reconcile(confirmed)
        if result == ReconcileResult.APPLIED:
            return IPNResult(IPNOutcome.APPLIED, "IPN handled successfully.")
        if result == ReconcileResult.ALREADY_PROCESSED:
            return IPNResult(IPNOutcome.DUPLICATE, "IPN handled, duplicate transaction.")
        if result == ReconcileResult.NOT_FOUND:
            return IPNResult(IPNOutcome.UNKNOWN_TRANSACTION, "IPN handled, but transaction not found.")
        return IPNResult(IPNOutcome.REJECTED, "IPN handled, but transaction details mismatch.")
