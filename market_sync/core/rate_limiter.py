"""
Per-user request budgets backed by Redis counters.

Fixed windows: the first hit in a window creates the counter with INCR
and starts its TTL; later hits only increment. INCR is atomic, so two
concurrent requests never observe the same count. When Redis is not
connected, or a counter command fails, the request is allowed.
"""

from dataclasses import dataclass
from typing import Any

import structlog
from redis.exceptions import RedisError

from .exceptions import RateLimitError

logger = structlog.get_logger()


def build_rate_limit_key(operation: str, user_id: str) -> str:
    """Counter key for one user and one operation."""
    return f"rate_limit:{operation}:{user_id}"


@dataclass(frozen=True)
class RateLimitStatus:
    """Outcome of counting one request."""

    allowed: bool
    count: int
    remaining: int
    retry_after: int = 0


class RateLimiter:
    """Fixed-window limiter over a RedisCache-like object exposing ``client``."""

    def __init__(self, redis_cache: Any) -> None:
        self.redis = redis_cache

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitStatus:
        """
        Count one request against ``key``.

        Args:
            key: Counter key (see build_rate_limit_key)
            limit: Requests allowed per window
            window_seconds: Window length

        Returns:
            RateLimitStatus; retry_after is only set when the request is denied
        """
        client = self.redis.client
        if client is None:
            logger.warning("Redis not connected - rate limit not enforced", key=key)
            return RateLimitStatus(allowed=True, count=0, remaining=limit)

        try:
            count = await client.incr(key)
            if count == 1:
                await client.expire(key, window_seconds)
        except RedisError as e:
            logger.warning(
                "Redis error - rate limit not enforced",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return RateLimitStatus(allowed=True, count=0, remaining=limit)

        if count <= limit:
            return RateLimitStatus(allowed=True, count=count, remaining=limit - count)

        return RateLimitStatus(
            allowed=False,
            count=count,
            remaining=0,
            retry_after=await self._seconds_until_reset(key, window_seconds),
        )

    async def _seconds_until_reset(self, key: str, window_seconds: int) -> int:
        try:
            ttl = await self.redis.client.ttl(key)
            if ttl == -1:
                # Counter lost its expiry; without one it would block the user forever
                await self.redis.client.expire(key, window_seconds)
                return window_seconds
        except RedisError as e:
            logger.warning("Redis TTL lookup failed", key=key, error_type=type(e).__name__)
            return window_seconds
        if ttl is None or ttl <= 0:
            return window_seconds
        return int(ttl)

    async def enforce_limit(
        self, key: str, limit: int, window_seconds: int
    ) -> RateLimitStatus:
        """
        Count one request or raise once the budget is spent.

        Raises:
            RateLimitError: Budget exhausted; carries retry_after in seconds
        """
        status = await self.hit(key, limit, window_seconds)
        if status.allowed:
            return status

        logger.warning(
            "Rate limit exceeded",
            key=key,
            count=status.count,
            limit=limit,
            retry_after=status.retry_after,
        )
        raise RateLimitError(
            "Rate limit exceeded. Please try again later.",
            retry_after=status.retry_after,
            limit=limit,
            window_seconds=window_seconds,
        )
