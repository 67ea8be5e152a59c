"""
Per-IP rate limiting for HTTP endpoints.

Uses slowapi. Shared Redis storage in production, in-process memory
elsewhere. This throttles raw traffic; the per-user signal budget is
enforced separately by core.rate_limiter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200/minute"],
    storage_uri=_settings.redis_url if _settings.is_production else "memory://",
)
