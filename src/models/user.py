"""FundRaiser Donation Backend - Donor (user) model."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from src.models.transaction import Transaction


class UserRole(str, Enum):
    """User roles for access control."""

    USER = "user"
    ADMIN = "admin"


class AccountStatus(str, Enum):
    """Account lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


class User(SQLModel, table=True):
    """Donor account.

    Attributes:
        id: Auto-increment primary key
        email: Login email, stored lowercased (unique)
        username: Public handle (unique)
        password_hash: bcrypt hash, never serialized
        otp_hash / otp_expires_at: pending password-reset OTP

        # Donation ledger
        donated_amount: Sum of completed donations; only the reconciler increments it
        transactions: Donation history (append-only)
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: str = Field(max_length=15)
    username: str = Field(max_length=30, unique=True, index=True)
    description: str = Field(default="", max_length=500)
    password_hash: str = Field(max_length=255)
    role: UserRole = Field(default=UserRole.USER)
    account_status: AccountStatus = Field(default=AccountStatus.ACTIVE)
    is_verified: bool = Field(default=False)

    # Password reset
    otp_hash: str | None = Field(default=None, max_length=255)
    otp_expires_at: datetime | None = Field(default=None)

    # Address (all optional; the gateway gets placeholders when absent)
    address_line1: str | None = Field(default=None, max_length=255)
    address_line2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)

    donated_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=sa.Column(sa.DECIMAL(32, 2), nullable=False, default=Decimal("0")),
    )

    last_login: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    transactions: list["Transaction"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"order_by": "Transaction.created_at"},
    )

    __table_args__ = (
        sa.CheckConstraint("donated_amount >= 0", name="ck_users_donated_amount_non_negative"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.account_status == AccountStatus.ACTIVE
