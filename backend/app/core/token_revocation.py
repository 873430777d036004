"""
Token Revocation System using Redis.

Implements token blacklisting to invalidate bearer tokens when a user logs
out or when an account is deactivated.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from redis.exceptions import RedisError
from backend.app.core import redis_client as redis_client_module
from backend.app.core.config import settings

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"
ACCOUNT_TOKENS_PREFIX = "account:tokens:"


def _ttl_seconds() -> int:
    # Tokens expire on their own after this long
    return settings.access_token_expire_minutes * 60


async def revoke_token(token: str, subject: str) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        subject: E-mail address the token was issued to

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis_client_module.redis_client.setex(key, _ttl_seconds(), subject)
        return True
    except RedisError as e:
        logger.error("Error revoking token for %s: %s", subject, e)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    If Redis is unreachable the token is treated as valid.
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis_client_module.redis_client.exists(key)
        return exists > 0
    except RedisError as e:
        logger.warning("Error checking token revocation: %s", e)
        return False


async def revoke_account_tokens(email: str) -> bool:
    """
    Revoke every token issued to an e-mail address up to now.

    Called when a rider or driver account is deactivated so that open
    sessions stop working immediately. Tokens issued later are unaffected.
    """
    try:
        key = f"{ACCOUNT_TOKENS_PREFIX}{email.lower()}:revoked_at"
        revoked_at = int(datetime.now(timezone.utc).timestamp())
        await redis_client_module.redis_client.setex(key, _ttl_seconds(), str(revoked_at))
        return True
    except RedisError as e:
        logger.error("Error revoking tokens for %s: %s", email, e)
        return False


async def are_account_tokens_revoked(email: str, issued_at: Optional[int]) -> bool:
    """
    Check if a token issued at ``issued_at`` falls under an account-wide revocation.

    Tokens without an ``iat`` claim are treated as issued at the epoch.
    """
    try:
        key = f"{ACCOUNT_TOKENS_PREFIX}{email.lower()}:revoked_at"
        revoked_at = await redis_client_module.redis_client.get(key)
        if revoked_at is None:
            return False
        return int(issued_at or 0) <= int(revoked_at)
    except RedisError as e:
        logger.warning("Error checking account token revocation: %s", e)
        return False
