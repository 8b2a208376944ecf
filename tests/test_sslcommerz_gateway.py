from decimal import Decimal
from urllib.parse import parse_qs

import httpx
import pytest

from src.core.exceptions import GatewayUnavailableError
from src.gateway.sslcommerz import SESSION_PATH, VALIDATION_PATH, SSLCommerzGateway


def make_gateway(settings, handler) -> SSLCommerzGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SSLCommerzGateway(settings, client=client)


async def test_create_session_posts_credentials_and_returns_redirect(settings) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(
            200,
            json={
                "status": "SUCCESS",
                "sessionkey": "SESS123",
                "GatewayPageURL": "https://sandbox.sslcommerz.com/gw/SESS123",
            },
        )

    gateway = make_gateway(settings, handler)
    session = await gateway.create_session({"tran_id": "TR1", "total_amount": "500.00", "num_of_item": 1})

    assert seen["url"] == f"https://sandbox.sslcommerz.com{SESSION_PATH}"
    assert seen["form"]["store_id"] == ["teststore"]
    assert seen["form"]["store_passwd"] == ["teststore@ssl"]
    assert seen["form"]["num_of_item"] == ["1"]
    assert session.redirect_url == "https://sandbox.sslcommerz.com/gw/SESS123"
    assert session.session_key == "SESS123"
    await gateway.close()


async def test_create_session_refused_has_no_redirect(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "FAILED", "failedreason": "Store Credential Error"})

    gateway = make_gateway(settings, handler)
    session = await gateway.create_session({"tran_id": "TR1"})

    assert session.redirect_url is None
    assert session.failed_reason == "Store Credential Error"


async def test_verify_maps_validation_record(settings) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "status": "VALID",
                "tran_id": "TR1",
                "val_id": "VAL1",
                "amount": "500.00",
                "currency": "BDT",
                "bank_tran_id": "BANK1",
                "card_type": "VISA-Dutch Bangla",
                "value_a": "donor@example.com",
            },
        )

    gateway = make_gateway(settings, handler)
    verification = await gateway.verify("VAL1")

    assert seen["path"] == VALIDATION_PATH
    assert seen["params"]["val_id"] == "VAL1"
    assert seen["params"]["format"] == "json"
    assert verification.is_confirmed
    assert verification.transaction_id == "TR1"
    assert verification.amount == Decimal("500.00")
    assert verification.payer_email == "donor@example.com"
    assert verification.bank_transaction_id == "BANK1"


async def test_verify_invalid_status_is_not_confirmed(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "INVALID_TRANSACTION"})

    gateway = make_gateway(settings, handler)
    verification = await gateway.verify("VAL1")

    assert not verification.is_confirmed
    assert verification.amount is None


@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(502, text="Bad Gateway"),
        lambda request: httpx.Response(200, text="<html>maintenance</html>"),
        lambda request: httpx.Response(200, json=["unexpected"]),
        lambda request: httpx.Response(200, json={"tran_id": "TR1"}),
        lambda request: httpx.Response(200, json={"status": "VALID", "amount": "abc"}),
    ],
    ids=["http-error", "non-json", "non-object", "missing-status", "bad-amount"],
)
async def test_verify_unusable_response_is_unavailable(settings, handler) -> None:
    gateway = make_gateway(settings, handler)
    with pytest.raises(GatewayUnavailableError) as exc_info:
        await gateway.verify("VAL1")
    assert exc_info.value.retryable


async def test_timeout_is_unavailable(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    gateway = make_gateway(settings, handler)
    with pytest.raises(GatewayUnavailableError):
        await gateway.create_session({"tran_id": "TR1"})


async def test_connection_error_is_unavailable(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = make_gateway(settings, handler)
    with pytest.raises(GatewayUnavailableError):
        await gateway.verify("VAL1")
