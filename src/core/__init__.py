"""Core module - configuration, security, and exceptions."""

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ErrorKind,
    ErrorSeverity,
    FundRaiserError,
    GatewayInitiationFailedError,
    GatewayUnavailableError,
    InvalidAmountError,
    InvalidDonorProfileError,
    NotFoundError,
    NotificationDeliveryError,
    NotificationRejectedError,
    PersistenceError,
    RejectionReason,
    ValidationError,
)
from src.core.security import (
    create_access_token,
    decode_access_token,
    generate_otp,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Security
    "hash_password",
    "verify_password",
    "generate_otp",
    "create_access_token",
    "decode_access_token",
    # Exceptions
    "ErrorKind",
    "ErrorSeverity",
    "FundRaiserError",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "InvalidAmountError",
    "InvalidDonorProfileError",
    "NotFoundError",
    "ConflictError",
    "GatewayUnavailableError",
    "GatewayInitiationFailedError",
    "PersistenceError",
    "RejectionReason",
    "NotificationRejectedError",
    "NotificationDeliveryError",
]
