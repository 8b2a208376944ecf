"""FundRaiser Donation Backend - Payment API routes.

- Donor-facing: initiate a donation, list own transactions
- Gateway-facing: IPN webhook and browser redirect callbacks
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from src.api.deps import CurrentUser, NotificationServiceDep, PaymentServiceDep
from src.core.exceptions import FundRaiserError
from src.schemas.pagination import CustomPage
from src.schemas.payment import (
    PaymentInitiateRequest,
    PaymentInitiateResponse,
    TransactionResponse,
)
from src.services.ipn_service import IPNNotification

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payment", tags=["Payment"])


async def read_payload(request: Request) -> dict[str, Any]:
    """Merge query parameters with a form or JSON body.

    The gateway posts form data; query parameters cover GET deliveries
    and callback URLs that carry ``tran_id``.
    """
    payload: dict[str, Any] = dict(request.query_params)
    if request.method != "POST":
        return payload

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        if isinstance(body, dict):
            payload.update(body)
    elif content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        payload.update({k: v for k, v in form.items() if isinstance(v, str)})
    return payload


# ============ Donor endpoints ============


@router.post("/initiate", response_model=PaymentInitiateResponse)
async def initiate_payment(
    data: PaymentInitiateRequest,
    user: CurrentUser,
    service: PaymentServiceDep,
) -> PaymentInitiateResponse:
    """Start a donation and return the gateway page URL."""
    initiated = await service.initiate_payment(user, data.amount)
    return PaymentInitiateResponse(
        message="Payment initiated",
        gateway_url=initiated.redirect_url,
        transaction_id=initiated.transaction_id,
    )


@router.get("/transactions", response_model=CustomPage[TransactionResponse])
async def list_transactions(
    user: CurrentUser,
    service: PaymentServiceDep,
) -> CustomPage[TransactionResponse]:
    """List the current donor's transactions."""
    return await service.list_transactions(user.id)


# ============ Gateway IPN ============


@router.api_route("/ipn", methods=["GET", "POST"], response_class=PlainTextResponse)
async def payment_ipn(request: Request, service: NotificationServiceDep) -> PlainTextResponse:
    """Receive an instant payment notification.

    200 tells the gateway the notification was handled (including rejected
    or unknown ones); 500 asks it to deliver again.
    """
    payload = await read_payload(request)
    notification = IPNNotification.from_payload(payload)

    try:
        result = await service.process(notification)
    except FundRaiserError as e:
        if not e.retryable:
            raise
        logger.error(f"IPN for {notification.tran_id} not processed, asking for retry: {e.message}")
        return PlainTextResponse(
            "IPN processing failed, please retry.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return PlainTextResponse(result.message, status_code=status.HTTP_200_OK)


# ============ Browser redirects ============


@router.api_route("/success", methods=["GET", "POST"])
async def payment_success(request: Request, service: PaymentServiceDep) -> RedirectResponse:
    payload = await read_payload(request)
    url = await service.handle_success(payload.get("tran_id"))
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.api_route("/fail", methods=["GET", "POST"])
async def payment_fail(request: Request, service: PaymentServiceDep) -> RedirectResponse:
    payload = await read_payload(request)
    reason = payload.get("error") or payload.get("failedreason")
    url = await service.handle_fail(payload.get("tran_id"), reason)
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.api_route("/cancel", methods=["GET", "POST"])
async def payment_cancel(request: Request, service: PaymentServiceDep) -> RedirectResponse:
    payload = await read_payload(request)
    url = await service.handle_cancel(payload.get("tran_id"))
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)
