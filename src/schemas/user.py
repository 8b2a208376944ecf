"""Donor account schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.models.user import AccountStatus, UserRole
from src.schemas.payment import MoneyStr

PHONE_PATTERN = r"^[0-9]{11,15}$"


class RegisterRequest(BaseModel):
    """Donor registration request."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN, description="11-15 digits")
    username: str = Field(..., min_length=3, max_length=30)
    description: str = Field(..., min_length=1, max_length=500)
    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str = Field(..., min_length=6, max_length=128)

    @field_validator("first_name", "last_name", "username", "description")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class LoginRequest(BaseModel):
    """Email/password login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Donor profile response (never includes secrets)."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    username: str
    description: str
    role: UserRole
    account_status: AccountStatus
    is_verified: bool
    donated_amount: MoneyStr

    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    last_login: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str = "User created successfully"
    user: UserResponse


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserResponse


class PasswordUpdateRequest(BaseModel):
    """Update password with an emailed OTP."""

    otp: str = Field(..., pattern=r"^[0-9]{4}$", description="4-digit OTP")
    new_password: str = Field(..., min_length=8, max_length=128)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
