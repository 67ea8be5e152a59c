"""
FastAPI application for market synchronization and trading signals.

Run locally:
    uvicorn market_sync.main:app --reload
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .api.dependencies.rate_limit import limiter
from .api.health import router as health_router
from .api.insights import router as insights_router
from .api.market_data import router as market_data_router
from .api.portfolios import router as portfolios_router
from .api.signals import router as signals_router
from .core.config import get_settings
from .core.exceptions import AppError, RateLimitError
from .core.utils.date_utils import utcnow
from .database.mongodb import (
    HOLDINGS,
    MARKET_DATA,
    PORTFOLIOS,
    TRADING_SIGNALS,
    MongoDB,
)
from .database.redis import RedisCache
from .database.repositories import (
    HoldingRepository,
    InstrumentRepository,
    PortfolioRepository,
    SignalRepository,
)
from .services.advisory_client import create_advisory_client
from .shared.sanitizers import sanitize_error_message

logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()

API_VERSION = "0.1.0"
IP_RETRY_AFTER_SECONDS = 60


async def ensure_indexes(mongodb: MongoDB) -> None:
    """Create the indexes every repository relies on."""
    await InstrumentRepository(mongodb.get_collection(MARKET_DATA)).ensure_indexes()
    await HoldingRepository(mongodb.get_collection(HOLDINGS)).ensure_indexes()
    await PortfolioRepository(mongodb.get_collection(PORTFOLIOS)).ensure_indexes()
    await SignalRepository(mongodb.get_collection(TRADING_SIGNALS)).ensure_indexes()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open MongoDB (required) and Redis (optional), then publish the
    handles on app.state for the request dependencies.
    """
    settings = get_settings()
    logger.info("Starting market sync API", environment=settings.environment)

    mongodb = MongoDB()
    redis_cache = RedisCache()

    try:
        await mongodb.connect(settings.mongodb_url)
        await ensure_indexes(mongodb)
        redis_connected = await redis_cache.connect(settings.redis_url)

        app.state.mongodb = mongodb
        app.state.redis = redis_cache
        app.state.advisory_client = create_advisory_client(settings)

        logger.info(
            "Market sync API ready",
            rate_limiting_enforced=redis_connected,
            advisory_configured=app.state.advisory_client is not None,
        )
        yield
    finally:
        await redis_cache.disconnect()
        await mongodb.disconnect()
        logger.info("Market sync API stopped")


def register_error_handlers(app: FastAPI) -> None:
    """Translate per-IP throttling and AppError subclasses into JSON responses."""

    @app.exception_handler(RateLimitExceeded)
    async def ip_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={
                "detail": f"Rate limit exceeded: {exc.detail}",
                "error_type": "rate_limit_error",
                "retry_after": IP_RETRY_AFTER_SECONDS,
            },
            headers={"Retry-After": str(IP_RETRY_AFTER_SECONDS)},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            **exc.to_dict(),
        )

        content: dict[str, object] = {
            "detail": sanitize_error_message(exc.message),
            "error_type": exc.error_type,
            "retryable": exc.retryable,
            "timestamp": utcnow().isoformat(),
        }
        headers = None
        if isinstance(exc, RateLimitError):
            content["retry_after"] = exc.retry_after
            headers = {"Retry-After": str(exc.retry_after)}

        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routers."""
    settings = get_settings()

    app = FastAPI(
        title="Market Sync API",
        description="Simulated market data synchronization, portfolio valuation and trading signals",
        version=API_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    # SlowAPIMiddleware breaks FastAPI TestClient
    if settings.environment != "test":
        app.add_middleware(SlowAPIMiddleware)

    register_error_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(market_data_router)
    app.include_router(portfolios_router)
    app.include_router(signals_router)
    app.include_router(insights_router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "market_sync.main:app",
        host="0.0.0.0",  # nosec B104 - container entrypoint
        port=8000,
        reload=get_settings().is_development,
        log_config=None,
    )
