"""Email Service - SMTP delivery."""

import logging
from email.message import EmailMessage
from typing import Any

import aiosmtplib

from src.core.config import Settings
from src.core.exceptions import NotificationDeliveryError
from src.services.email_templates import render_template

logger = logging.getLogger(__name__)


class EmailService:
    """Async SMTP email sender."""

    def __init__(self, settings: Settings) -> None:
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.from_name = settings.email_from_name
        self.timeout = 30

    @property
    def is_configured(self) -> bool:
        return bool(self.user and self.password)

    def build_message(
        self,
        to: str,
        subject: str,
        text: str,
        html: str | None = None,
        reply_to: str | None = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f"{self.from_name} <{self.user}>"
        message["To"] = to
        message["Subject"] = subject
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")
        return message

    async def send(
        self,
        to: str,
        subject: str,
        text: str,
        html: str | None = None,
        reply_to: str | None = None,
    ) -> None:
        """Send one email.

        Raises:
            NotificationDeliveryError: SMTP not configured or delivery failed
        """
        if not self.is_configured:
            raise NotificationDeliveryError("SMTP credentials are not configured", {"to": to})

        message = self.build_message(to, subject, text, html, reply_to)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                start_tls=True,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPException as e:
            raise NotificationDeliveryError(f"SMTP delivery failed: {e}", {"to": to}) from e
        except OSError as e:
            raise NotificationDeliveryError(f"SMTP server unreachable: {e}", {"to": to}) from e

        logger.info(f"Email sent to {to} with subject: {subject}")

    async def send_template(
        self,
        to: str,
        kind: str,
        data: dict[str, Any],
        reply_to: str | None = None,
    ) -> None:
        """Render a template and send it."""
        subject, text, html = render_template(kind, data)
        await self.send(to, subject, text, html, reply_to)
