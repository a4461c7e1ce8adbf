"""
backend/shoreline/contact/routes.py

Contact Routes
Public contact form submission, protected by Turnstile and rate limited.
"""

import json
import logging

from fastapi import APIRouter, Request, status
from pydantic import ValidationError

from shoreline.contact.schemas import ContactMessage, ContactResponse
from shoreline.contact.services import is_contact_configured, submit_contact_message
from shoreline.core.exceptions import ContactFormError
from shoreline.core.limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["Contact"])


@router.post(
    "",
    response_model=ContactResponse,
    status_code=status.HTTP_200_OK,
    summary="Send Contact Message",
    description="Verifies the Turnstile token and emails the message to the site owner.",
)
@limiter.limit("5/minute")
async def send_contact(request: Request) -> ContactResponse:
    try:
        if not is_contact_configured():
            logger.error("[CONTACT] Contact form is missing Turnstile or email configuration")
            raise ContactFormError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Contact form is not configured."
            )

        try:
            body = await request.json()
            data = ContactMessage.model_validate(body)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
            raise ContactFormError(status.HTTP_400_BAD_REQUEST, "Invalid request body.")

        client_ip = request.client.host if request.client else None
        await submit_contact_message(data, client_ip)
    except ContactFormError:
        raise
    except Exception as e:
        logger.error(f"[CONTACT] Unhandled error: {e}", exc_info=True)
        raise ContactFormError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Something went wrong. Please try again later.",
        )

    return ContactResponse()
