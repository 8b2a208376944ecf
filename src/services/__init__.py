"""FundRaiser Service Layer.

Business logic services for the donation backend.
Each service encapsulates domain-specific operations and can be reused across API endpoints.
"""

from src.services.contact_service import ContactService
from src.services.email_service import EmailService
from src.services.ipn_service import (
    IPNNotification,
    IPNOutcome,
    IPNResult,
    NotificationService,
    NotificationValidator,
)
from src.services.notifier import Notifier
from src.services.payment_service import InitiatedPayment, PaymentService, normalize_amount
from src.services.reconciliation_service import (
    ConfirmedPayment,
    ReconcileResult,
    TransactionReconciler,
)
from src.services.user_service import UserService

__all__ = [
    "ConfirmedPayment",
    "ContactService",
    "EmailService",
    "IPNNotification",
    "IPNOutcome",
    "IPNResult",
    "InitiatedPayment",
    "NotificationService",
    "NotificationValidator",
    "Notifier",
    "PaymentService",
    "ReconcileResult",
    "TransactionReconciler",
    "UserService",
    "normalize_amount",
]
