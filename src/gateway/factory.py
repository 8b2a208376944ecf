"""Payment gateway factory.

Provides the process-wide gateway client used by API dependencies.
"""

import logging

from src.core.config import Settings, get_settings
from src.gateway.base import PaymentGateway

logger = logging.getLogger(__name__)

# Singleton instance
_gateway: PaymentGateway | None = None


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    """Build the configured gateway client."""
    from src.gateway.sslcommerz import SSLCommerzGateway

    return SSLCommerzGateway(settings)


def get_payment_gateway() -> PaymentGateway:
    """Get payment gateway singleton (FastAPI dependency)."""
    global _gateway
    if _gateway is None:
        _gateway = build_payment_gateway(get_settings())
    return _gateway


async def close_payment_gateway() -> None:
    """Close the cached gateway client."""
    global _gateway
    if _gateway is not None:
        await _gateway.close()
        _gateway = None
        logger.info("Payment gateway client closed")
