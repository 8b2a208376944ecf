"""FundRaiser Donation Backend - Contact form API route."""

from fastapi import APIRouter

from src.api.deps import ContactServiceDep
from src.schemas.contact import ContactMessageRequest
from src.schemas.user import MessageResponse

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("/send-message", response_model=MessageResponse)
async def send_message(data: ContactMessageRequest, service: ContactServiceDep) -> MessageResponse:
    """Forward a contact form message to the admin inbox."""
    await service.send_message(data)
    return MessageResponse(
        message="Your message has been sent successfully! We will get back to you soon."
    )
