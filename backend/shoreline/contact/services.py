"""
backend/shoreline/contact/services.py

Contact Service Layer
Verifies the Cloudflare Turnstile token and forwards the visitor's message
to the site owner by email.
"""

import logging

import httpx
from fastapi import status

from shoreline.contact.schemas import ContactMessage
from shoreline.core.config import settings
from shoreline.core.email import EmailDeliveryError, is_email_configured, send_contact_message
from shoreline.core.exceptions import ContactFormError

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


def is_contact_configured() -> bool:
    return bool(settings.TURNSTILE_SECRET_KEY) and is_email_configured()


def build_text_body(data: ContactMessage) -> str:
    """Plain-text email body: one line per field, a blank line, then the message."""
    lines = [f"Name: {data.name}", f"Email: {data.email}"]
    if data.phone:
        lines.append(f"Phone: {data.phone}")
    lines.append(f"Subject: {data.subject}")
    lines.append("")
    lines.append(data.message)
    return "\n".join(lines)


def validate_message(data: ContactMessage) -> None:
    """
    Raises:
        ContactFormError: 400 with the first problem found.
    """
    if not data.turnstile_token:
        raise ContactFormError(status.HTTP_400_BAD_REQUEST, "Verification is required.")
    if not (data.name and data.email and data.subject and data.message):
        raise ContactFormError(
            status.HTTP_400_BAD_REQUEST, "Name, email, subject, and message are required."
        )
    if "@" not in data.email:
        raise ContactFormError(status.HTTP_400_BAD_REQUEST, "Please provide a valid email address.")


async def verify_turnstile(token: str, remote_ip: str | None = None) -> bool:
    """Asks Cloudflare whether the Turnstile token is valid."""
    form = {"secret": settings.TURNSTILE_SECRET_KEY, "response": token}
    if remote_ip:
        form["remoteip"] = remote_ip
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.post(TURNSTILE_VERIFY_URL, data=form)
    result = response.json()
    if not result.get("success"):
        logger.warning(f"[CONTACT] Turnstile rejected token: {result.get('error-codes')}")
        return False
    return True


async def submit_contact_message(data: ContactMessage, remote_ip: str | None = None) -> None:
    """
    Validates, verifies and sends a contact message.

    Raises:
        ContactFormError: 400 for visitor errors, 500 when sending fails.
    """
    validate_message(data)

    if not await verify_turnstile(data.turnstile_token, remote_ip):
        raise ContactFormError(status.HTTP_400_BAD_REQUEST, "Verification failed. Please try again.")

    try:
        await send_contact_message(
            name=data.name,
            email=data.email,
            phone=data.phone or None,
            subject=data.subject,
            message=data.message,
            text_body=build_text_body(data),
        )
    except EmailDeliveryError:
        raise ContactFormError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to send message. Please try again later.",
        )
    logger.info(f"[CONTACT] Message from {data.email} forwarded")
