"""
backend/shoreline/core/schemas.py

Core Schemas

Defines core Pydantic models used across the application, including:
- The camelCase base model used for every JSON body.
- Generic success/acknowledgement response schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema whose fields are exposed in camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(BaseModel):
    """
    Generic response for completed write operations.
    """

    success: bool = Field(True, description="Whether the operation succeeded")


class OkResponse(BaseModel):
    """
    Generic acknowledgement response.
    """

    ok: bool = Field(True, description="Acknowledgement flag")
