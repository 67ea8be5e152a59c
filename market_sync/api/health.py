"""
Health endpoint for probes and the sync CronJob's preflight.
"""

from typing import Any

from fastapi import APIRouter, Depends

from ..core.config import Settings, get_settings
from ..database.mongodb import MongoDB
from ..database.redis import RedisCache
from .dependencies.services import get_mongodb, get_redis

router = APIRouter()


@router.get("/health")
async def health_check(
    mongodb: MongoDB = Depends(get_mongodb),
    redis_cache: RedisCache = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    MongoDB is required; Redis only backs rate limiting. Either one being
    down reports "degraded" but still answers 200.
    """
    mongodb_status = await mongodb.health_check()
    redis_status = await redis_cache.health_check()

    healthy = bool(mongodb_status.get("connected")) and bool(redis_status.get("connected"))

    return {
        "status": "ok" if healthy else "degraded",
        "environment": settings.environment,
        "dependencies": {"mongodb": mongodb_status, "redis": redis_status},
        "configuration": {
            "database": settings.database_name,
            "advisory_configured": settings.advisory_enabled,
        },
    }
