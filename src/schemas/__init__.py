"""Schemas module - Pydantic DTOs for request/response."""

from src.schemas.contact import ContactMessageRequest
from src.schemas.pagination import CustomPage
from src.schemas.payment import (
    PaymentInitiateRequest,
    PaymentInitiateResponse,
    TransactionResponse,
)
from src.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)

__all__: list[str] = [
    # Pagination
    "CustomPage",
    # Payment
    "PaymentInitiateRequest",
    "PaymentInitiateResponse",
    "TransactionResponse",
    # User
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "PasswordUpdateRequest",
    "MessageResponse",
    # Contact
    "ContactMessageRequest",
]
