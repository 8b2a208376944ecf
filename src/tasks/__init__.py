"""FundRaiser Tasks Module."""

from src.tasks.celery_app import celery_app
from src.tasks.email import send_templated_email

__all__ = [
    "celery_app",
    "send_templated_email",
]
