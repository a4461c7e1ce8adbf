"""
tests/contact/test_contact_routes.py

Tests for contact/routes.py and contact/services.py covering:
- Field validation messages
- Turnstile verification
- Email delivery failures
- Missing configuration
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from httpx import AsyncClient

from shoreline.contact import routes as contact_routes
from shoreline.contact import services as contact_services
from shoreline.contact.schemas import ContactMessage
from shoreline.core.email import EmailDeliveryError

VALID_BODY = {
    "name": " Jane Doe ",
    "email": "jane@example.com",
    "phone": "",
    "subject": "Custom table",
    "message": "Could you build an oak table?",
    "cf-turnstile-response": "token-123",
}


@pytest.fixture
def contact_configured():
    with patch.object(contact_routes, "is_contact_configured", return_value=True):
        yield


# --- Helpers ---
def test_build_text_body_without_phone() -> None:
    data = ContactMessage.model_validate(VALID_BODY)
    assert contact_services.build_text_body(data) == (
        "Name: Jane Doe\n"
        "Email: jane@example.com\n"
        "Subject: Custom table\n"
        "\n"
        "Could you build an oak table?"
    )


def test_build_text_body_with_phone() -> None:
    data = ContactMessage.model_validate({**VALID_BODY, "phone": " 902-555-0100 "})
    assert "Phone: 902-555-0100\n" in contact_services.build_text_body(data)


# --- Route ---
@pytest.mark.asyncio
@patch.object(contact_services, "send_contact_message", new_callable=AsyncMock)
@patch.object(contact_services, "verify_turnstile", new_callable=AsyncMock)
async def test_send_contact_success(
    mock_verify: AsyncMock,
    mock_send: AsyncMock,
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    mock_verify.return_value = True
    response = await async_client.post("/api/contact", json=VALID_BODY)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Message sent."}
    mock_send.assert_awaited_once()
    assert mock_send.await_args.kwargs["name"] == "Jane Doe"
    assert mock_send.await_args.kwargs["phone"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"cf-turnstile-response": ""}, "Verification is required."),
        ({"subject": "   "}, "Name, email, subject, and message are required."),
        ({"email": "not-an-email"}, "Please provide a valid email address."),
    ],
)
async def test_send_contact_validation(
    overrides: dict,
    message: str,
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    response = await async_client.post("/api/contact", json={**VALID_BODY, **overrides})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "message": message}


@pytest.mark.asyncio
async def test_send_contact_invalid_body(
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    response = await async_client.post(
        "/api/contact", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "message": "Invalid request body."}


@pytest.mark.asyncio
@patch.object(contact_services, "send_contact_message", new_callable=AsyncMock)
@patch.object(contact_services, "verify_turnstile", new_callable=AsyncMock)
async def test_send_contact_turnstile_rejected(
    mock_verify: AsyncMock,
    mock_send: AsyncMock,
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    mock_verify.return_value = False
    response = await async_client.post("/api/contact", json=VALID_BODY)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "message": "Verification failed. Please try again."}
    mock_send.assert_not_awaited()


@pytest.mark.asyncio
@patch.object(contact_services, "send_contact_message", new_callable=AsyncMock)
@patch.object(contact_services, "verify_turnstile", new_callable=AsyncMock)
async def test_send_contact_email_failure(
    mock_verify: AsyncMock,
    mock_send: AsyncMock,
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    mock_verify.return_value = True
    mock_send.side_effect = EmailDeliveryError("SendGrid responded with status 401")
    response = await async_client.post("/api/contact", json=VALID_BODY)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "success": False,
        "message": "Failed to send message. Please try again later.",
    }


@pytest.mark.asyncio
@patch.object(contact_services, "verify_turnstile", new_callable=AsyncMock)
async def test_send_contact_unexpected_error(
    mock_verify: AsyncMock,
    contact_configured: None,
    async_client: AsyncClient,
) -> None:
    mock_verify.side_effect = RuntimeError("connection reset")
    response = await async_client.post("/api/contact", json=VALID_BODY)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "success": False,
        "message": "Something went wrong. Please try again later.",
    }


@pytest.mark.asyncio
async def test_send_contact_not_configured(async_client: AsyncClient) -> None:
    with patch.object(contact_routes, "is_contact_configured", return_value=False):
        response = await async_client.post("/api/contact", json=VALID_BODY)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "message": "Contact form is not configured."}
