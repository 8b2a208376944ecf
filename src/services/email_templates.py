"""Outbound email templates.

Each template renders to (subject, plain text, html). Values coming from
users are HTML-escaped before they reach the html part.
"""

from html import escape
from typing import Any

from src.core.exceptions import ValidationError

SIGNATURE_TEXT = "Best regards,\nThe FundRaiser Team"
SIGNATURE_HTML = "<p>Best regards,<br>The FundRaiser Team</p>"


def _donation_receipt(data: dict[str, Any]) -> tuple[str, str, str]:
    name = data.get("first_name") or "Donor"
    amount = data["amount"]
    currency = data.get("currency", "BDT")
    tran_id = data["transaction_id"]
    text = (
        f"Dear {name},\n\n"
        f"Thank you for your generous donation of {currency} {amount} to FundRaiser!\n\n"
        f"Your transaction ID is: {tran_id}\n\n"
        "Your support helps us continue our work. We truly appreciate it!\n\n"
        f"{SIGNATURE_TEXT}"
    )
    html = (
        f"<p>Dear {escape(name)},</p>"
        f"<p>Thank you for your generous donation of <strong>{escape(currency)} {escape(amount)}</strong>"
        " to FundRaiser!</p>"
        f"<p>Your transaction ID is: <strong>{escape(tran_id)}</strong></p>"
        "<p>Your support helps us continue our work. We truly appreciate it!</p>"
        f"{SIGNATURE_HTML}"
    )
    return "Thank You for Your Donation!", text, html


def _welcome(data: dict[str, Any]) -> tuple[str, str, str]:
    name = data.get("first_name") or "there"
    frontend_url = data.get("frontend_url", "")
    text = (
        f"Dear {name},\n\n"
        "Welcome to FundRaiser! We're excited to have you join our community.\n\n"
        "Start exploring trending campaigns and make a difference today.\n\n"
        f"{SIGNATURE_TEXT}"
    )
    html = (
        f"<p>Dear <strong>{escape(name)}</strong>,</p>"
        "<p>Welcome to FundRaiser! We're excited to have you join our community.</p>"
        f'<p>Start exploring <a href="{escape(frontend_url)}/index.html#trending">trending campaigns</a>'
        " and make a difference today.</p>"
        "<p>If you have any questions, feel free to reply to this email.</p>"
        f"{SIGNATURE_HTML}"
    )
    return "Welcome to FundRaiser!", text, html


def _password_otp(data: dict[str, Any]) -> tuple[str, str, str]:
    name = data.get("first_name") or "there"
    otp = data["otp"]
    minutes = data.get("expiry_minutes", 10)
    text = (
        f"Dear {name},\n\n"
        "You have requested to update your password for your FundRaiser account.\n\n"
        f"Your One-Time Password (OTP) is: {otp}\n\n"
        f"This OTP is valid for {minutes} minutes. Please do not share this with anyone.\n\n"
        "If you did not request this, please ignore this email or contact support.\n\n"
        f"{SIGNATURE_TEXT}"
    )
    html = (
        f"<p>Dear {escape(name)},</p>"
        "<p>You have requested to update your password for your FundRaiser account.</p>"
        f"<p>Your One-Time Password (OTP) is: <strong>{escape(otp)}</strong></p>"
        f"<p>This OTP is valid for {minutes} minutes. Please do not share this with anyone.</p>"
        "<p>If you did not request this, please ignore this email or contact support.</p>"
        f"{SIGNATURE_HTML}"
    )
    return "FundRaiser Password Update OTP", text, html


def _contact_message(data: dict[str, Any]) -> tuple[str, str, str]:
    text = (
        "New Message from FundRaiser Contact Form\n\n"
        f"Name: {data['name']}\nEmail: {data['email']}\n"
        f"Subject: {data['subject']}\nMessage: {data['message']}\n\n"
        "This email was sent from your FundRaiser website contact form."
    )
    html = (
        "<h3>New Message from FundRaiser Contact Form</h3>"
        f"<p><strong>Name:</strong> {escape(data['name'])}</p>"
        f"<p><strong>Email:</strong> {escape(data['email'])}</p>"
        f"<p><strong>Subject:</strong> {escape(data['subject'])}</p>"
        "<p><strong>Message:</strong></p>"
        f"<p>{escape(data['message'])}</p>"
        "<p><em>This email was sent from your FundRaiser website contact form.</em></p>"
    )
    return f"New Contact Form Submission: {data['subject']}", text, html


TEMPLATES = {
    "donation_receipt": _donation_receipt,
    "welcome": _welcome,
    "password_otp": _password_otp,
    "contact_message": _contact_message,
}


def render_template(kind: str, data: dict[str, Any]) -> tuple[str, str, str]:
    """Render an email template.

    Returns:
        (subject, text, html)

    Raises:
        ValidationError: Unknown template kind
    """
    renderer = TEMPLATES.get(kind)
    if renderer is None:
        raise ValidationError(f"Unknown email template: {kind}")
    return renderer(data)
