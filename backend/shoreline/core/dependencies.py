"""
backend/shoreline/core/dependencies.py

Authentication and Authorization Dependencies

Provides session lookup and admin access control for FastAPI routes:
- Validates JWT tokens from Bearer header OR HttpOnly cookie
- Checks against blacklisted tokens (logout protection)
- Retrieves the signed-in user from the database
- Restricts admin routes to users whose database row is flagged `is_admin`
- Lets the cleanup cron authenticate with `CRON_SECRET`
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.blacklist import is_token_blacklisted
from shoreline.core.config import settings
from shoreline.core.exceptions import APIError
from shoreline.core.tokens import decode_access_token
from shoreline.database.models import User
from shoreline.database.session import get_db

# ---------------------------------------------------
# Logger Configuration
# ---------------------------------------------------
logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"
MIN_CRON_SECRET_LENGTH = 16


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer ") :].strip() or None
    return None


# ---------------------------------------------------
# Authentication Functions
# ---------------------------------------------------


async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Resolve the signed-in user, checking the Bearer header first, then the
    HttpOnly cookie. Returns None when there is no valid session.
    """
    token = _bearer_token(request) or request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        logger.debug("[AUTH] No token found in Authorization header or access_token cookie.")
        return None

    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None

    jti = payload.get("jti")
    if jti and await is_token_blacklisted(jti):
        logger.warning(f"[AUTH] Blacklisted token detected: jti={jti}")
        return None

    result = await db.execute(select(User).filter(User.email == payload["sub"]))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning(f"[AUTH] JWT valid but no matching user found: sub={payload['sub']}")
    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """
    Require a signed-in user.

    Raises:
        APIError: 401 Unauthorized when there is no valid session.
    """
    if user is None:
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return user


# ---------------------------------------------------
# Authorization Functions
# ---------------------------------------------------


def ensure_admin(user: User | None) -> User:
    """
    Raise 401 without a session and 403 for signed-in non-admins.
    """
    if user is None:
        raise APIError(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    if not user.is_admin:
        logger.warning(f"[RBAC] Access denied: User {user.id} is not an admin")
        raise APIError(status.HTTP_403_FORBIDDEN, "Forbidden")
    return user


async def require_admin(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Dependency restricting a route to admins."""
    return ensure_admin(user)


def is_cron_request(request: Request) -> bool:
    """True when the request carries `Authorization: Bearer <CRON_SECRET>`."""
    secret = settings.CRON_SECRET
    if not secret or len(secret) < MIN_CRON_SECRET_LENGTH:
        return False
    token = _bearer_token(request)
    return token is not None and secrets.compare_digest(token, secret)


async def require_admin_or_cron(
    request: Request,
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User | None:
    """
    Dependency accepting either the scheduled cleanup job or an admin.
    Returns the admin user, or None for a cron call.
    """
    if is_cron_request(request):
        logger.info("[AUTH] Request authenticated with cron secret")
        return None
    return ensure_admin(user)


CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]
AdminUser = Annotated[User, Depends(require_admin)]
