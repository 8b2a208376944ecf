"""Base payment gateway interface.

Defines the contract the payment flow relies on. The gateway is an opaque
remote service: it opens hosted checkout sessions and answers verification
queries about completed payments.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

CONFIRMED_STATUSES = frozenset({"VALID", "VALIDATED"})


@dataclass
class GatewaySession:
    """Result of opening a hosted checkout session."""

    redirect_url: str | None
    session_key: str | None = None
    status: str | None = None
    failed_reason: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class GatewayVerification:
    """The gateway's own view of a payment, looked up by validation ID."""

    status: str
    transaction_id: str | None
    amount: Decimal | None
    currency: str | None = None
    payer_email: str | None = None
    bank_transaction_id: str | None = None
    card_type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_confirmed(self) -> bool:
        return self.status.upper() in CONFIRMED_STATUSES


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the gateway name (e.g., 'sslcommerz')."""
        pass

    @abstractmethod
    async def create_session(self, request: dict[str, Any]) -> GatewaySession:
        """Open a hosted checkout session.

        Args:
            request: Gateway session fields (amount, tran_id, callback URLs, customer)

        Returns:
            GatewaySession; redirect_url is None when the gateway refused

        Raises:
            GatewayUnavailableError: Network failure, non-2xx or malformed response
        """
        pass

    @abstractmethod
    async def verify(self, validation_id: str) -> GatewayVerification:
        """Ask the gateway for the authoritative record of a payment.

        Args:
            validation_id: Gateway-issued validation ID from a notification

        Returns:
            GatewayVerification

        Raises:
            GatewayUnavailableError: Network failure, non-2xx or malformed response
        """
        pass

    async def close(self) -> None:
        """Release network resources."""
        return None
