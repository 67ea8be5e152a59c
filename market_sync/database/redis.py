"""
Redis handle for per-user rate-limit counters.

Redis is optional: when it cannot be reached at startup the client stays
None and the rate limiter lets requests through.
"""

from typing import Any

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()


class RedisCache:
    """Async Redis connection holding the rate-limit counters."""

    def __init__(self) -> None:
        self.client: redis.Redis | None = None

    async def connect(self, redis_url: str) -> bool:
        """
        Connect and ping.

        Returns:
            True when connected; False when Redis is unreachable (fail-open mode)
        """
        client = redis.from_url(redis_url, decode_responses=True)
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.warning(
                "Redis unavailable - rate limiting disabled",
                error=str(e),
                error_type=type(e).__name__,
            )
            await client.aclose()
            self.client = None
            return False

        self.client = client
        logger.info("Redis connection established")
        return True

    async def disconnect(self) -> None:
        """Close the client if open."""
        if self.client is None:
            return
        await self.client.aclose()
        self.client = None
        logger.info("Redis connection closed")

    async def health_check(self) -> dict[str, Any]:
        """Ping Redis; reports fail-open mode when not connected."""
        if self.client is None:
            return {"connected": False, "rate_limiting": "fail_open"}

        try:
            await self.client.ping()
        except redis.RedisError as e:
            logger.error("Redis health check failed", error=str(e))
            return {"connected": False, "rate_limiting": "fail_open", "error": str(e)}

        return {"connected": True, "rate_limiting": "enforced"}
