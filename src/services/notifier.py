"""Outbound donor notifications.

The notifier only enqueues work; delivery happens in the email task.
Failures are logged and reported as False, never raised.
"""

import logging
from typing import Any

from src.core.config import Settings

logger = logging.getLogger(__name__)


class Notifier:
    """Enqueue templated emails to donors."""

    def __init__(self, settings: Settings) -> None:
        self.reply_to = settings.admin_email

    def notify(self, recipient: str, template_kind: str, template_data: dict[str, Any]) -> bool:
        """Enqueue a notice.

        Args:
            recipient: Donor email
            template_kind: Template name (see email_templates.TEMPLATES)
            template_data: JSON-serializable template values

        Returns:
            True if the notice was enqueued
        """
        from src.tasks.email import send_templated_email

        try:
            # Called from request handlers: fail fast instead of retrying the publish
            send_templated_email.apply_async(
                args=(recipient, template_kind, template_data, self.reply_to),
                retry=False,
            )
        except Exception as e:
            logger.error(f"Failed to enqueue {template_kind} notice for {recipient}: {e}", exc_info=True)
            return False

        logger.info(f"Enqueued {template_kind} notice for {recipient}")
        return True
