"""User Service - Business logic for donor accounts."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import or_, select

from src.core.config import Settings
from src.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotificationDeliveryError,
    ValidationError,
)
from src.core.security import (
    OTP_ROUNDS,
    create_access_token,
    generate_otp,
    hash_password,
    verify_password,
)
from src.models.user import User
from src.schemas.user import RegisterRequest
from src.services.email_service import EmailService
from src.services.notifier import Notifier

logger = logging.getLogger(__name__)


class UserService:
    """Service for donor registration, login and password reset."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        notifier: Notifier | None = None,
        email_service: EmailService | None = None,
    ):
        self.db = db
        self.settings = settings
        self.notifier = notifier
        self.email_service = email_service

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)."""
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def register(self, data: RegisterRequest) -> User:
        """Create a donor account and enqueue a welcome email.

        Raises:
            ValidationError: Passwords do not match
            ConflictError: Email or username already taken
        """
        if data.password != data.confirm_password:
            raise ValidationError("Passwords do not match")

        email = data.email.lower()
        existing = await self.db.execute(
            select(User).where(or_(User.email == email, User.username == data.username))
        )
        if existing.scalars().first() is not None:
            raise ConflictError("User already exists")

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            phone=data.phone,
            username=data.username,
            description=data.description,
            password_hash=hash_password(data.password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent registration
            await self.db.rollback()
            raise ConflictError("User already exists") from e
        await self.db.refresh(user)

        logger.info(f"User registered: {user.email} (id={user.id})")

        if self.notifier is not None:
            self.notifier.notify(
                user.email,
                "welcome",
                {"first_name": user.first_name, "frontend_url": self.settings.frontend_url},
            )
        return user

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Verify credentials and issue a session token.

        Returns:
            (user, token)

        Raises:
            AuthenticationError: Unknown email, wrong password or inactive account
        """
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("Account is not active")

        user.last_login = datetime.utcnow()
        await self.db.commit()
        await self.db.refresh(user)

        token = create_access_token(user.id, user.role.value, self.settings)
        logger.info(f"User logged in: {user.id}")
        return user, token

    async def request_password_otp(self, user: User) -> None:
        """Email a one-time password for a password update.

        The OTP is stored hashed and cleared again if the email cannot be sent.

        Raises:
            NotificationDeliveryError: Email could not be sent
        """
        otp = generate_otp()
        user.otp_hash = hash_password(otp, rounds=OTP_ROUNDS)
        user.otp_expires_at = datetime.utcnow() + timedelta(minutes=self.settings.otp_expiry_minutes)
        user.updated_at = datetime.utcnow()
        await self.db.commit()

        email_service = self.email_service or EmailService(self.settings)
        try:
            await email_service.send_template(
                user.email,
                "password_otp",
                {
                    "first_name": user.first_name,
                    "otp": otp,
                    "expiry_minutes": self.settings.otp_expiry_minutes,
                },
                reply_to=self.settings.admin_email,
            )
        except NotificationDeliveryError:
            logger.exception(f"Failed to send password OTP to user {user.id}")
            user.otp_hash = None
            user.otp_expires_at = None
            await self.db.commit()
            raise NotificationDeliveryError("Failed to send OTP. Please try again later.") from None

        logger.info(f"Password OTP sent to user {user.id}")

    async def update_password(self, user: User, otp: str, new_password: str) -> None:
        """Replace the password after checking the emailed OTP.

        Raises:
            ValidationError: OTP missing, expired or wrong
        """
        if not user.otp_hash or not user.otp_expires_at or user.otp_expires_at < datetime.utcnow():
            user.otp_hash = None
            user.otp_expires_at = None
            await self.db.commit()
            raise ValidationError("Invalid or expired OTP. Please request a new one.")

        if not verify_password(otp, user.otp_hash):
            raise ValidationError("Invalid OTP.")

        user.password_hash = hash_password(new_password)
        user.otp_hash = None
        user.otp_expires_at = None
        user.updated_at = datetime.utcnow()
        await self.db.commit()
        logger.info(f"Password updated for user {user.id}")
