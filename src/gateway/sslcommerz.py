"""SSLCommerz payment gateway client.

Uses the v4 session API to open hosted checkout pages and the validation
server API to confirm payments reported through IPN.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from src.core.config import Settings
from src.core.exceptions import GatewayUnavailableError
from src.gateway.base import GatewaySession, GatewayVerification, PaymentGateway

logger = logging.getLogger(__name__)

BASE_URLS = {
    "sandbox": "https://sandbox.sslcommerz.com",
    "live": "https://securepay.sslcommerz.com",
}
SESSION_PATH = "/gwprocess/v4/api.php"
VALIDATION_PATH = "/validator/api/validationserverAPI.php"


class SSLCommerzGateway(PaymentGateway):
    """SSLCommerz REST client."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.store_id = settings.ssl_store_id
        self.store_password = settings.ssl_store_password
        self.base_url = BASE_URLS[settings.ssl_mode]
        self.timeout = settings.gateway_timeout_seconds
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    @property
    def name(self) -> str:
        return "sslcommerz"

    async def close(self) -> None:
        await self._client.aclose()

    async def create_session(self, request: dict[str, Any]) -> GatewaySession:
        payload = {
            "store_id": self.store_id,
            "store_passwd": self.store_password,
            **{k: str(v) for k, v in request.items() if v is not None},
        }
        data = await self._request("POST", SESSION_PATH, data=payload)

        redirect_url = data.get("GatewayPageURL") or None
        if not redirect_url:
            logger.warning(
                f"SSLCommerz session refused for tran_id={request.get('tran_id')}: "
                f"status={data.get('status')} reason={data.get('failedreason')}"
            )
        return GatewaySession(
            redirect_url=redirect_url,
            session_key=data.get("sessionkey"),
            status=data.get("status"),
            failed_reason=data.get("failedreason"),
            raw=data,
        )

    async def verify(self, validation_id: str) -> GatewayVerification:
        params = {
            "val_id": validation_id,
            "store_id": self.store_id,
            "store_passwd": self.store_password,
            "v": "1",
            "format": "json",
        }
        data = await self._request("GET", VALIDATION_PATH, params=params)

        status = data.get("status")
        if not isinstance(status, str):
            raise GatewayUnavailableError(
                "Malformed validation response: missing status",
                {"val_id": validation_id},
            )

        return GatewayVerification(
            status=status,
            transaction_id=data.get("tran_id"),
            amount=_parse_amount(data.get("amount"), validation_id),
            currency=data.get("currency_type") or data.get("currency"),
            # value_a carries the donor email we sent at session creation
            payer_email=data.get("cus_email") or data.get("value_a"),
            bank_transaction_id=data.get("bank_tran_id"),
            card_type=data.get("card_type"),
            raw=data,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise GatewayUnavailableError("Payment gateway timed out", {"path": path}) from e
        except httpx.HTTPStatusError as e:
            raise GatewayUnavailableError(
                f"Payment gateway returned HTTP {e.response.status_code}",
                {"path": path, "status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            raise GatewayUnavailableError(f"Payment gateway unreachable: {e}", {"path": path}) from e
        except ValueError as e:
            raise GatewayUnavailableError("Payment gateway returned non-JSON body", {"path": path}) from e

        if not isinstance(data, dict):
            raise GatewayUnavailableError("Payment gateway returned unexpected payload", {"path": path})
        return data


def _parse_amount(value: Any, validation_id: str) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise GatewayUnavailableError(
            "Malformed validation response: bad amount",
            {"val_id": validation_id, "amount": str(value)},
        ) from e
    if not amount.is_finite():
        raise GatewayUnavailableError(
            "Malformed validation response: bad amount",
            {"val_id": validation_id, "amount": str(value)},
        )
    return amount
