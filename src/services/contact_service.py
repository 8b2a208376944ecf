"""Contact Service - forwards contact form messages to the admin inbox."""

import logging

from src.core.config import Settings
from src.core.exceptions import NotificationDeliveryError
from src.schemas.contact import ContactMessageRequest
from src.services.email_service import EmailService

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, settings: Settings, email_service: EmailService | None = None):
        self.settings = settings
        self.email_service = email_service or EmailService(settings)

    async def send_message(self, data: ContactMessageRequest) -> None:
        """Email a contact message to the admin with reply-to set to the sender.

        Raises:
            NotificationDeliveryError: Email could not be sent
        """
        try:
            await self.email_service.send_template(
                self.settings.admin_email,
                "contact_message",
                {
                    "name": data.name,
                    "email": data.email,
                    "subject": data.subject,
                    "message": data.message,
                },
                reply_to=data.email,
            )
        except NotificationDeliveryError:
            logger.exception(f"Failed to forward contact message from {data.email}")
            raise NotificationDeliveryError(
                "Failed to send your message. Please try again later."
            ) from None

        logger.info(f"Contact message from {data.email} forwarded")
