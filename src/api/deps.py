"""Common FastAPI dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.auth import get_current_user
from src.core.config import Settings, get_settings
from src.db import get_db
from src.gateway import PaymentGateway, get_payment_gateway
from src.models.user import User
from src.services.contact_service import ContactService
from src.services.email_service import EmailService
from src.services.ipn_service import NotificationService, NotificationValidator
from src.services.notifier import Notifier
from src.services.payment_service import PaymentService
from src.services.reconciliation_service import TransactionReconciler
from src.services.user_service import UserService


def get_notifier(settings: Annotated[Settings, Depends(get_settings)]) -> Notifier:
    return Notifier(settings)


def get_email_service(settings: Annotated[Settings, Depends(get_settings)]) -> EmailService:
    return EmailService(settings)


def get_payment_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PaymentService:
    return PaymentService(db, gateway, settings)


def get_notification_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> NotificationService:
    return NotificationService(NotificationValidator(gateway), TransactionReconciler(db, notifier))


def get_user_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> UserService:
    return UserService(db, settings, notifier, email_service)


def get_contact_service(
    settings: Annotated[Settings, Depends(get_settings)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> ContactService:
    return ContactService(settings, email_service)


# ============ Type Aliases for Common Dependencies ============

CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
