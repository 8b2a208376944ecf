"""Email delivery tasks.

Outbound notices are sent here, after the request that triggered them has
committed, so SMTP latency and failures never reach the request path.
"""

import asyncio
import logging
from typing import Any

from src.core.config import get_settings
from src.core.exceptions import NotificationDeliveryError
from src.services.email_service import EmailService
from src.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    name="email.send_templated",
    max_retries=5,
    autoretry_for=(NotificationDeliveryError,),
    retry_backoff=True,
    retry_backoff_max=3600,
)
def send_templated_email(
    self,
    recipient: str,
    template_kind: str,
    template_data: dict[str, Any],
    reply_to: str | None = None,
) -> dict:
    """Render and send a templated email."""
    return asyncio.run(_send_templated_email(recipient, template_kind, template_data, reply_to))


async def _send_templated_email(
    recipient: str,
    template_kind: str,
    template_data: dict[str, Any],
    reply_to: str | None,
) -> dict:
    service = EmailService(get_settings())
    try:
        await service.send_template(recipient, template_kind, template_data, reply_to=reply_to)
    except NotificationDeliveryError as e:
        logger.warning(f"Email {template_kind} to {recipient} failed: {e.message}")
        raise
    return {"success": True, "template": template_kind}
