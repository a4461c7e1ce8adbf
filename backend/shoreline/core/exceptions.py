"""
core/exceptions.py

Description:
Defines the standard error response format for the API and the handlers
that render it.
"""

from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class APIError(HTTPException):
    """Custom exception with standardized error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        details: str | None = None,
        headers: dict[str, Any] | None = None,
    ):
        detail: dict[str, Any] = {"error": message}
        if details is not None:
            detail["details"] = details
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.message = message


class ContactFormError(APIError):
    """Contact form failure, rendered as {"success": false, "message": ...}."""

    def __init__(self, status_code: int, message: str):
        super().__init__(status_code=status_code, message=message)
        self.detail = {"success": False, "message": message}


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Renders APIError without FastAPI's default {"detail": ...} wrapper."""
    return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Maps request validation failures to 400 with the first message."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})
