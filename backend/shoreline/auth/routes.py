"""
backend/shoreline/auth/routes.py

Authentication Routes
- Google sign-in (login + callback)
- Current session lookup
- Logout (token revocation + cookie removal)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.auth.schemas import SessionUser
from shoreline.auth.services import (
    handle_google_callback,
    handle_google_login,
    logout_token,
    session_user,
)
from shoreline.core.dependencies import ACCESS_TOKEN_COOKIE, CurrentUserOptional
from shoreline.core.limiter import limiter
from shoreline.core.schemas import SuccessResponse
from shoreline.database.session import get_db

router = APIRouter(prefix="/auth", tags=["Authentication"])

DBDep = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "/google/login",
    summary="Login with Google",
    description="Redirects to Google's consent screen. Only allow-listed admin emails can finish signing in.",
)
@limiter.limit("10/minute")
async def google_login(request: Request) -> RedirectResponse:
    return await handle_google_login(request)


@router.get(
    "/google/callback",
    summary="Google OAuth Callback",
    description="Exchanges the code, stores the admin user, sets the session cookie and redirects to /admin.",
    include_in_schema=False,
)
async def google_callback(request: Request, db: DBDep) -> RedirectResponse:
    return await handle_google_callback(request, db)


@router.get(
    "/session",
    response_model=SessionUser | None,
    summary="Current Session",
    description="The signed-in user, or null.",
)
async def get_session(request: Request, user: CurrentUserOptional) -> SessionUser | None:
    return session_user(user)


@router.post(
    "/logout",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Logout",
    description="Revokes the session token and clears the session cookie.",
)
@limiter.limit("20/minute")
async def logout(request: Request, response: Response) -> SuccessResponse:
    auth_header = request.headers.get("Authorization", "")
    token = (
        auth_header[len("Bearer ") :]
        if auth_header.startswith("Bearer ")
        else request.cookies.get(ACCESS_TOKEN_COOKIE)
    )
    await logout_token(token)
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    return SuccessResponse()
