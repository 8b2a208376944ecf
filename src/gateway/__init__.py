"""Payment gateway module - remote checkout and verification clients."""

from src.gateway.base import GatewaySession, GatewayVerification, PaymentGateway
from src.gateway.factory import close_payment_gateway, get_payment_gateway

__all__ = [
    "PaymentGateway",
    "GatewaySession",
    "GatewayVerification",
    "get_payment_gateway",
    "close_payment_gateway",
]
