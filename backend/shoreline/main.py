"""
backend/shoreline/main.py

Application entrypoint for the Shoreline Woodworks site.
- Initializes logging
- Sets up the FastAPI application and middlewares
- Registers error handlers and all routers
"""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from shoreline.auth.routes import router as auth_router
from shoreline.contact.routes import router as contact_router
from shoreline.core.config import settings
from shoreline.core.exceptions import APIError, api_error_handler, validation_error_handler
from shoreline.core.limiter import limiter
from shoreline.core.logging import init_logging
from shoreline.media.routes import router as media_router
from shoreline.pages.routes import router as pages_router
from shoreline.project.routes import router as project_router
from shoreline.site.routes import router as site_router
from shoreline.tag.routes import router as tag_router

init_logging()

# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)


# -----------------------------
# Error Handlers
# -----------------------------
async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    return _rate_limit_exceeded_handler(request, exc)  # type: ignore[arg-type]


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]


# -----------------------------
# Middleware Configuration
# -----------------------------
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds common security headers to every response."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, same_site="lax")
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# Router Registration
# -----------------------------
app.include_router(auth_router)
app.include_router(project_router)
app.include_router(tag_router)
app.include_router(site_router)
app.include_router(media_router)
app.include_router(contact_router)
app.include_router(pages_router)
