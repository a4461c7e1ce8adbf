"""
backend/shoreline/contact/schemas.py

Contact Form Schemas
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContactMessage(BaseModel):
    """
    Contact form body. Values are coerced to trimmed strings; required-field
    checks happen in the service so the form gets friendly messages.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    email: str = ""
    phone: str = ""
    subject: str = ""
    message: str = ""
    turnstile_token: str = Field("", alias="cf-turnstile-response")

    @field_validator("*", mode="before")
    @classmethod
    def _trimmed_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class ContactResponse(BaseModel):
    success: bool = True
    message: str = "Message sent."
