"""
backend/shoreline/auth/services.py

Auth Service Layer
Google sign-in for the admin dashboard:
- Starts the OAuth flow and handles the callback
- Only emails on the AUTHORIZED_ADMIN_EMAIL allow-list may sign in
- Signed-in users are stored and flagged as admins
- Issues the session JWT cookie and revokes it on logout
"""

import logging
from typing import cast

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.auth.schemas import GoogleProfile, SessionUser
from shoreline.core.blacklist import blacklist_token
from shoreline.core.config import settings
from shoreline.core.dependencies import ACCESS_TOKEN_COOKIE
from shoreline.core.exceptions import APIError
from shoreline.core.tokens import create_access_token, decode_access_token, seconds_until_expiry
from shoreline.database.models import User

logger = logging.getLogger(__name__)

ADMIN_HOME = "/admin"
ACCESS_DENIED_REDIRECT = "/admin/error?error=AccessDenied"
SIGN_IN_FAILED_REDIRECT = "/admin/error?error=OAuthCallback"


# ------------------------------------------------
# Google OAuth2 Setup
# ------------------------------------------------
oauth = OAuth()

if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET:
    oauth.register(
        name="google",
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        client_kwargs={"scope": "openid email profile"},
    )
else:
    logger.warning("Google OAuth2 credentials not configured. Admin sign-in disabled.")


def is_google_oauth_configured() -> bool:
    return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET)


def is_authorized_admin(email: str | None) -> bool:
    """True when the email is on the admin allow-list. An empty list admits nobody."""
    allowed = settings.authorized_admin_emails
    return bool(email) and bool(allowed) and email.strip().lower() in allowed


def session_user(user: User | None) -> SessionUser | None:
    if user is None:
        return None
    return SessionUser(
        id=user.id,
        name=user.name,
        email=user.email,
        image=user.image,
        is_admin=user.is_admin,
    )


def set_session_cookie(response: RedirectResponse, token: str) -> None:
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


async def handle_google_login(request: Request) -> RedirectResponse:
    """Redirects the browser to Google's consent screen."""
    if not is_google_oauth_configured():
        raise APIError(status.HTTP_501_NOT_IMPLEMENTED, "Google login is not configured.")

    redirect_uri = str(request.url_for("google_callback"))
    logger.info("Redirecting to Google OAuth2 for admin sign-in")
    return cast(RedirectResponse, await oauth.google.authorize_redirect(request, redirect_uri))


async def upsert_admin_user(db: AsyncSession, profile: GoogleProfile) -> User:
    """Creates or refreshes the user row for an allowed Google account and flags it admin."""
    email = (profile.email or "").strip()
    result = await db.execute(select(User).filter(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(email=email)
        db.add(user)
        logger.info(f"Creating admin user via Google OAuth: {email}")

    user.name = profile.name or user.name
    user.image = profile.picture or user.image
    user.email_verified = profile.email_verified or user.email_verified
    user.is_admin = True

    await db.commit()
    await db.refresh(user)
    return user


async def handle_google_callback(request: Request, db: AsyncSession) -> RedirectResponse:
    """
    Exchanges the authorization code, enforces the allow-list, stores the
    user and sets the session cookie before redirecting to the dashboard.
    """
    if not is_google_oauth_configured():
        logger.error("Google OAuth callback attempted but not configured.")
        raise APIError(status.HTTP_501_NOT_IMPLEMENTED, "Google login is not configured.")

    try:
        token = await oauth.google.authorize_access_token(request)
        userinfo = token.get("userinfo") or await oauth.google.userinfo(token=token)
    except OAuthError as e:
        logger.error(f"OAuth token exchange failed during callback: {e}")
        return RedirectResponse(url=SIGN_IN_FAILED_REDIRECT, status_code=status.HTTP_302_FOUND)

    profile = GoogleProfile.model_validate(dict(userinfo))
    if not is_authorized_admin(profile.email):
        logger.warning(f"Rejected Google sign-in for non-admin email: {profile.email}")
        return RedirectResponse(url=ACCESS_DENIED_REDIRECT, status_code=status.HTTP_302_FOUND)

    try:
        user = await upsert_admin_user(db, profile)
    except Exception as e:
        await db.rollback()
        logger.error(f"Failed to store Google user {profile.email}: {e}", exc_info=True)
        return RedirectResponse(url=SIGN_IN_FAILED_REDIRECT, status_code=status.HTTP_302_FOUND)

    app_token = create_access_token({"sub": user.email, "uid": str(user.id)})
    logger.info(f"Admin signed in via Google: {user.email}")

    response = RedirectResponse(url=ADMIN_HOME, status_code=status.HTTP_302_FOUND)
    set_session_cookie(response, app_token)
    return response


async def logout_token(token: str | None) -> None:
    """Revokes the session token so it can't be replayed after logout."""
    if not token:
        return
    payload = decode_access_token(token)
    if not payload or not payload.get("jti"):
        return
    await blacklist_token(payload["jti"], seconds_until_expiry(payload))
    logger.info(f"Session revoked for sub={payload.get('sub')}")
