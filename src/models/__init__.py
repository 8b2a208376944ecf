"""Models module - SQLModel database entities."""

from src.models.transaction import Transaction, TransactionStatus, generate_transaction_id
from src.models.user import AccountStatus, User, UserRole

__all__ = [
    "User",
    "UserRole",
    "AccountStatus",
    "Transaction",
    "TransactionStatus",
    "generate_transaction_id",
]
