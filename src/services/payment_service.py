"""Payment Service - Business logic for donation payments."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import urlencode

from fastapi_pagination.ext.sqlmodel import apaginate
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from src.core.config import Settings
from src.core.exceptions import (
    GatewayInitiationFailedError,
    GatewayUnavailableError,
    InvalidAmountError,
    InvalidDonorProfileError,
)
from src.gateway.base import PaymentGateway
from src.models.transaction import Transaction, TransactionStatus, generate_transaction_id
from src.models.user import User
from src.schemas.pagination import CustomPage
from src.schemas.payment import TransactionResponse
from src.services.reconciliation_service import quantize_amount

logger = logging.getLogger(__name__)

PLACEHOLDER = "N/A"

# Gateway session constants
PRODUCT_CATEGORY = "Donation"
PRODUCT_PROFILE = "non-physical-goods"
SHIPPING_METHOD = "NO"
EMI_OPTION = 0

# Frontend outcome pages
SUCCESS_PAGE = "/HTML/payment-success.html"
FAIL_PAGE = "/HTML/payment-fail.html"
CANCEL_PAGE = "/HTML/payment-cancel.html"
ERROR_PAGE = "/HTML/payment-error.html"


@dataclass
class InitiatedPayment:
    """Result of a successful payment initiation."""

    redirect_url: str
    transaction_id: str


def normalize_amount(value: Any) -> Decimal:
    """Validate a requested donation amount.

    Args:
        value: Raw amount (int, float, Decimal or numeric string)

    Returns:
        Amount rounded to currency precision

    Raises:
        InvalidAmountError: Not a positive finite number
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value) from None
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(value)

    amount = quantize_amount(amount)
    if amount <= 0:
        raise InvalidAmountError(value)
    return amount


class PaymentService:
    """Service for payment initiation and browser redirect outcomes."""

    def __init__(self, db: AsyncSession, gateway: PaymentGateway, settings: Settings):
        self.db = db
        self.gateway = gateway
        self.settings = settings

    # ============ Session Initiation ============

    def callback_url(self, outcome: str, transaction_id: str | None = None) -> str:
        """Build a merchant-side callback URL for the gateway."""
        base = f"{self.settings.backend_url.rstrip('/')}/api/payment/{outcome}"
        if transaction_id:
            return f"{base}?{urlencode({'tran_id': transaction_id})}"
        return base

    def build_session_request(
        self,
        donor: User,
        amount: Decimal,
        transaction_id: str,
    ) -> dict[str, Any]:
        """Assemble the gateway session request for a donation.

        Optional profile fields fall back to placeholders.
        """
        full_name = donor.full_name or PLACEHOLDER
        line1 = donor.address_line1 or PLACEHOLDER
        line2 = donor.address_line2 or PLACEHOLDER
        city = donor.city or PLACEHOLDER
        state = donor.state or PLACEHOLDER
        postcode = donor.zip_code or self.settings.default_postcode
        country = donor.country or self.settings.country

        return {
            "total_amount": f"{amount:.2f}",
            "currency": self.settings.currency,
            "tran_id": transaction_id,
            "success_url": self.callback_url("success", transaction_id),
            "fail_url": self.callback_url("fail", transaction_id),
            "cancel_url": self.callback_url("cancel", transaction_id),
            "ipn_url": self.callback_url("ipn"),
            "product_category": PRODUCT_CATEGORY,
            "product_name": f"Donation by {full_name}",
            "num_of_item": 1,
            "product_profile": PRODUCT_PROFILE,
            "cus_name": full_name,
            "cus_email": donor.email,
            "cus_add1": line1,
            "cus_add2": line2,
            "cus_city": city,
            "cus_state": state,
            "cus_postcode": postcode,
            "cus_country": country,
            "cus_phone": donor.phone or PLACEHOLDER,
            "cus_fax": PLACEHOLDER,
            "shipping_method": SHIPPING_METHOD,
            "ship_name": full_name,
            "ship_add1": line1,
            "ship_add2": line2,
            "ship_city": city,
            "ship_state": state,
            "ship_postcode": postcode,
            "ship_country": country,
            "emi_option": EMI_OPTION,
            "value_a": donor.email,
        }

    async def initiate_payment(self, donor: User, amount: Any) -> InitiatedPayment:
        """Open a gateway session and record an initiated transaction.

        The transaction is persisted only after the gateway returned a
        redirect URL, so a failed initiation never leaves a row behind.

        Args:
            donor: Authenticated donor
            amount: Requested donation amount

        Returns:
            InitiatedPayment with the gateway redirect URL

        Raises:
            InvalidAmountError: Amount is not a positive finite number
            InvalidDonorProfileError: Donor has no email
            GatewayInitiationFailedError: Gateway refused/unreachable or the record could not be saved
        """
        amount = normalize_amount(amount)
        if not donor.email:
            raise InvalidDonorProfileError("Donor email is required to make a payment.")

        donor_id = donor.id
        transaction_id = generate_transaction_id()
        request = self.build_session_request(donor, amount, transaction_id)

        try:
            session = await self.gateway.create_session(request)
        except GatewayUnavailableError as e:
            logger.error(f"Gateway initiation error for {transaction_id}: {e.message}")
            raise GatewayInitiationFailedError(
                "Payment initiation failed. Please try again later.",
                {"transaction_id": transaction_id},
            ) from e

        if not session.redirect_url:
            raise GatewayInitiationFailedError(
                "Failed to initiate payment. No gateway URL found.",
                {"transaction_id": transaction_id, "reason": session.failed_reason},
            )

        transaction = Transaction(
            transaction_id=transaction_id,
            user_id=donor_id,
            amount=amount,
            currency=self.settings.currency,
            status=TransactionStatus.INITIATED,
        )
        self.db.add(transaction)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to record transaction {transaction_id}: {e}")
            raise GatewayInitiationFailedError(
                "Payment initiation failed. Please try again later.",
                {"transaction_id": transaction_id},
            ) from e

        logger.info(
            f"Payment initiated: {transaction_id} {amount} {self.settings.currency} for user {donor_id}"
        )
        return InitiatedPayment(redirect_url=session.redirect_url, transaction_id=transaction_id)

    # ============ Queries ============

    async def get_transaction(self, transaction_id: str) -> Transaction | None:
        """Get transaction by its unique transaction ID."""
        result = await self.db.execute(
            select(Transaction).where(Transaction.transaction_id == transaction_id)
        )
        return result.scalar_one_or_none()

    async def list_transactions(self, user_id: int) -> CustomPage[TransactionResponse]:
        """List a donor's transactions, newest first.

        Args:
            user_id: Owning donor

        Returns:
            Paginated transaction list
        """
        query = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        )
        return await apaginate(
            self.db,
            query,
            transformer=lambda items: [TransactionResponse.model_validate(t) for t in items],
        )

    # ============ Browser Redirect Outcomes ============

    def frontend_url(self, page: str, transaction_id: str | None = None) -> str:
        url = f"{self.settings.frontend_url.rstrip('/')}{page}"
        if transaction_id:
            return f"{url}?{urlencode({'tran_id': transaction_id})}"
        return url

    async def handle_success(self, transaction_id: str | None) -> str:
        """Resolve the success redirect.

        The browser redirect is not a trusted channel: completion only
        happens through the IPN path, so this never mutates state.
        """
        if not transaction_id:
            logger.warning("Success redirect without tran_id")
            return self.frontend_url(ERROR_PAGE)

        try:
            transaction = await self.get_transaction(transaction_id)
        except SQLAlchemyError as e:
            logger.error(f"Success redirect lookup for {transaction_id} failed: {e}")
            return self.frontend_url(ERROR_PAGE)
        if transaction is None:
            logger.warning(f"Success redirect for unknown transaction {transaction_id}")
            return self.frontend_url(ERROR_PAGE)

        return self.frontend_url(SUCCESS_PAGE, transaction_id)

    async def handle_fail(self, transaction_id: str | None, reason: str | None = None) -> str:
        """Mark an initiated transaction failed and resolve the fail redirect."""
        if transaction_id:
            await self._close_initiated(transaction_id, TransactionStatus.FAILED, reason)
        return self.frontend_url(FAIL_PAGE, transaction_id)

    async def handle_cancel(self, transaction_id: str | None) -> str:
        """Mark an initiated transaction cancelled and resolve the cancel redirect."""
        if transaction_id:
            await self._close_initiated(transaction_id, TransactionStatus.CANCELLED)
        return self.frontend_url(CANCEL_PAGE, transaction_id)

    async def _close_initiated(
        self,
        transaction_id: str,
        status: TransactionStatus,
        reason: str | None = None,
    ) -> bool:
        """Move a transaction to failed/cancelled only while it is still initiated.

        Returns:
            True if the transaction was updated
        """
        now = datetime.utcnow()
        values: dict[str, Any] = {"status": status}
        if status == TransactionStatus.FAILED:
            values["failed_at"] = now
            if reason:
                values["fail_reason"] = reason[:500]
        else:
            values["cancelled_at"] = now

        try:
            result = await self.db.execute(
                update(Transaction)
                .where(
                    Transaction.transaction_id == transaction_id,
                    Transaction.status == TransactionStatus.INITIATED,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            # The redirect is informational; the transaction simply stays initiated
            await self.db.rollback()
            logger.error(f"Failed to mark {transaction_id} {status.value}: {e}")
            return False

        if result.rowcount != 1:
            logger.info(
                f"{status.value.capitalize()} redirect for {transaction_id} ignored: not in initiated state"
            )
            return False

        logger.info(f"Transaction {transaction_id} marked {status.value}")
        return True
