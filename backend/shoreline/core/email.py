"""
backend/shoreline/core/email.py

Email Sending Utilities

Sends the contact-form notification to the site owner through SendGrid.
The plain-text body is the canonical content; an HTML alternative is
rendered from a Jinja2 template.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, ReplyTo, To
from starlette.concurrency import run_in_threadpool

from shoreline.core.config import settings

logger = logging.getLogger(__name__)

jinja_env = Environment(
    loader=FileSystemLoader(settings.mail_templates_path),
    autoescape=select_autoescape(["html", "xml"]),
)


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects or fails to accept a message."""


def is_email_configured() -> bool:
    return all([settings.SENDGRID_API_KEY, settings.MAIL_FROM, settings.MAIL_TO])


def _render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Renders an email template using Jinja2 with provided context.
    """
    template = jinja_env.get_template(template_name)
    full_context = {
        "year": datetime.now(timezone.utc).year,
        "site_name": settings.SITE_NAME,
        "base_url": str(settings.BASE_URL).rstrip("/"),
        **context,
    }
    return template.render(full_context)


async def _send_email(
    subject: str,
    text_content: str,
    html_content: str | None = None,
    reply_to: str | None = None,
) -> None:
    """
    Sends an email to the site owner (MAIL_TO) using the SendGrid API.

    Raises:
        EmailDeliveryError: When SendGrid fails or answers with a non-2xx status.
    """
    if not settings.EMAILS_ENABLED:
        logger.warning(f"Email sending disabled. Skipping message with subject '{subject}'")
        return

    message = Mail(
        from_email=From(email=settings.MAIL_FROM, name=settings.MAIL_FROM_NAME),
        to_emails=To(settings.MAIL_TO),
        subject=subject,
        plain_text_content=text_content,
        html_content=html_content,
    )
    if reply_to:
        message.reply_to = ReplyTo(reply_to)

    try:
        client = SendGridAPIClient(settings.SENDGRID_API_KEY)
        response = await run_in_threadpool(client.send, message)
    except Exception as e:
        logger.error(f"Failed to send email with subject '{subject}': {e}")
        raise EmailDeliveryError(str(e)) from e

    if response.status_code >= 300:
        logger.error(f"SendGrid API error: Status={response.status_code}, Body={response.body}")
        raise EmailDeliveryError(f"SendGrid responded with status {response.status_code}")

    logger.info(f"Email sent for subject '{subject}' with status code {response.status_code}")


async def send_contact_message(
    name: str,
    email: str,
    subject: str,
    message: str,
    text_body: str,
    phone: str | None = None,
) -> None:
    """
    Forwards a contact-form submission with the visitor as Reply-To.
    """
    html_content = _render_template(
        "contact_message.html",
        {
            "name": name,
            "email": email,
            "phone": phone,
            "subject": subject,
            "message": message,
        },
    )
    await _send_email(
        subject=subject,
        text_content=text_body,
        html_content=html_content,
        reply_to=email,
    )
