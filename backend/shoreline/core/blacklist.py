"""
backend/shoreline/core/blacklist.py

Session Revocation using Async Redis

Signing out stores the session token's `jti` in Redis until the token would
have expired anyway. When Redis is unreachable, sign-out still clears the
cookie and lookups treat every token as live.
"""

import logging

import redis.asyncio as redis

from shoreline.core.config import settings

logger = logging.getLogger(__name__)

REVOKED_PREFIX = "shoreline:revoked_session:"

redis_client: redis.Redis = redis.Redis(
    host=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    db=settings.REDIS_DB,
    decode_responses=True,
)


async def blacklist_token(jti: str, expires_in: int) -> None:
    """
    Revoke a session token by its `jti` for `expires_in` seconds.
    """
    try:
        await redis_client.setex(f"{REVOKED_PREFIX}{jti}", expires_in, "1")
        logger.debug(f"[BLACKLIST] Session revoked: jti={jti} for {expires_in}s")
    except redis.RedisError as e:
        logger.error(f"[BLACKLIST] Failed to revoke session jti={jti}: {e}")


async def is_token_blacklisted(jti: str) -> bool:
    """
    True when the session token with this `jti` was revoked.
    """
    try:
        return await redis_client.exists(f"{REVOKED_PREFIX}{jti}") == 1
    except redis.RedisError as e:
        logger.error(f"[BLACKLIST] Failed to check session jti={jti}: {e}")
        return False
