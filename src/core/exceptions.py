"""FundRaiser Donation Backend - Custom exceptions.

Every error carries a machine-checkable classification (kind + severity)
that the HTTP layer maps to an external response.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """How an error should be surfaced."""

    CALLER_INPUT = "caller_input"  # 4xx to the initiating caller
    POLICY_REJECTION = "policy_rejection"  # acknowledged, never retried
    TRANSIENT = "transient"  # retryable infrastructure failure
    SIDE_EFFECT = "side_effect"  # logged only


class ErrorSeverity(str, Enum):
    """Log severity for an error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class FundRaiserError(Exception):
    """Base exception for all FundRaiser errors."""

    kind: ErrorKind = ErrorKind.CALLER_INPUT
    severity: ErrorSeverity = ErrorSeverity.WARNING
    status_code: int = 400
    error_code: str = "BAD_REQUEST"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.TRANSIENT


class AuthenticationError(FundRaiserError):
    """Authentication failed."""

    status_code = 401
    error_code = "UNAUTHENTICATED"


class AuthorizationError(FundRaiserError):
    """User lacks permission for this action."""

    status_code = 403
    error_code = "FORBIDDEN"


class ValidationError(FundRaiserError):
    """Input validation failed."""

    error_code = "VALIDATION_ERROR"


class InvalidAmountError(ValidationError):
    """Donation amount is not a positive finite number."""

    error_code = "INVALID_AMOUNT"

    def __init__(self, amount: Any = None, message: str = "Please provide a valid donation amount.") -> None:
        details = {"amount": str(amount)} if amount is not None else None
        super().__init__(message, details)


class InvalidDonorProfileError(ValidationError):
    """Donor profile lacks a field the gateway requires."""

    error_code = "INVALID_DONOR_PROFILE"


class NotFoundError(FundRaiserError):
    """Requested resource does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(FundRaiserError):
    """Resource already exists."""

    status_code = 409
    error_code = "CONFLICT"


class GatewayUnavailableError(FundRaiserError):
    """Payment gateway unreachable, timed out or returned garbage."""

    kind = ErrorKind.TRANSIENT
    severity = ErrorSeverity.ERROR
    status_code = 503
    error_code = "GATEWAY_UNAVAILABLE"


class GatewayInitiationFailedError(FundRaiserError):
    """A gateway session could not be opened for a donation."""

    kind = ErrorKind.TRANSIENT
    severity = ErrorSeverity.ERROR
    status_code = 502
    error_code = "GATEWAY_INITIATION_FAILED"


class PersistenceError(FundRaiserError):
    """Database write failed."""

    kind = ErrorKind.TRANSIENT
    severity = ErrorSeverity.ERROR
    status_code = 500
    error_code = "PERSISTENCE_ERROR"


class RejectionReason(str, Enum):
    """Why an inbound payment notification was not applied."""

    MISSING_FIELDS = "missing_fields"
    UNCONFIRMED = "unconfirmed"
    MISMATCH = "mismatch"
    INVALID_PAYER = "invalid_payer"


class NotificationRejectedError(FundRaiserError):
    """Inbound notification failed validation; acknowledged but not applied."""

    kind = ErrorKind.POLICY_REJECTION
    status_code = 200
    error_code = "NOTIFICATION_REJECTED"

    def __init__(
        self,
        reason: RejectionReason,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.reason = reason
        super().__init__(message, details)
        if reason == RejectionReason.MISMATCH:
            self.severity = ErrorSeverity.ERROR


class NotificationDeliveryError(FundRaiserError):
    """Outbound email or enqueue failed."""

    kind = ErrorKind.SIDE_EFFECT
    severity = ErrorSeverity.ERROR
    status_code = 500
    error_code = "NOTIFICATION_FAILED"
