"""
Dependencies wiring repositories and services for API endpoints.

Connection handles live on app.state (set in main.lifespan); everything
else is built per request.
"""

import secrets

import structlog
from fastapi import Depends, Header, Request

from ...core.config import Settings, get_settings
from ...core.exceptions import AuthenticationError
from ...core.rate_limiter import RateLimiter
from ...database.mongodb import (
    HOLDINGS,
    MARKET_DATA,
    PORTFOLIOS,
    TRADING_SIGNALS,
    MongoDB,
)
from ...database.redis import RedisCache
from ...database.repositories.holding_repository import HoldingRepository
from ...database.repositories.instrument_repository import InstrumentRepository
from ...database.repositories.portfolio_repository import PortfolioRepository
from ...database.repositories.signal_repository import SignalRepository
from ...services.advisory_client import AdvisoryClient
from ...services.insights_service import InsightsService
from ...services.market_sync_service import MarketSyncService
from ...services.portfolio_service import PortfolioService
from ...services.signals.generator import SignalGenerator

logger = structlog.get_logger()


def get_mongodb(request: Request) -> MongoDB:
    """Get MongoDB instance from app state."""
    mongodb: MongoDB = request.app.state.mongodb
    return mongodb


def get_redis(request: Request) -> RedisCache:
    """Get Redis instance from app state."""
    redis_cache: RedisCache = request.app.state.redis
    return redis_cache


def get_advisory_client(request: Request) -> AdvisoryClient | None:
    """Get the advisory client singleton, None when unconfigured."""
    return getattr(request.app.state, "advisory_client", None)


def get_instrument_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> InstrumentRepository:
    """Get instrument repository instance."""
    return InstrumentRepository(mongodb.get_collection(MARKET_DATA))


def get_holding_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> HoldingRepository:
    """Get holding repository instance."""
    return HoldingRepository(mongodb.get_collection(HOLDINGS))


def get_portfolio_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> PortfolioRepository:
    """Get portfolio repository instance."""
    return PortfolioRepository(mongodb.get_collection(PORTFOLIOS))


def get_signal_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> SignalRepository:
    """Get signal repository instance."""
    return SignalRepository(mongodb.get_collection(TRADING_SIGNALS))


def get_rate_limiter(redis_cache: RedisCache = Depends(get_redis)) -> RateLimiter:
    """Get per-user rate limiter."""
    return RateLimiter(redis_cache)


def get_market_sync_service(
    instrument_repo: InstrumentRepository = Depends(get_instrument_repository),
    holding_repo: HoldingRepository = Depends(get_holding_repository),
    portfolio_repo: PortfolioRepository = Depends(get_portfolio_repository),
    settings: Settings = Depends(get_settings),
) -> MarketSyncService:
    """Get synchronization service instance."""
    return MarketSyncService(
        instrument_repo=instrument_repo,
        holding_repo=holding_repo,
        portfolio_repo=portfolio_repo,
        settings=settings,
    )


def get_portfolio_service(
    portfolio_repo: PortfolioRepository = Depends(get_portfolio_repository),
    holding_repo: HoldingRepository = Depends(get_holding_repository),
    instrument_repo: InstrumentRepository = Depends(get_instrument_repository),
) -> PortfolioService:
    """Get portfolio service instance."""
    return PortfolioService(
        portfolio_repo=portfolio_repo,
        holding_repo=holding_repo,
        instrument_repo=instrument_repo,
    )


def get_signal_generator(
    instrument_repo: InstrumentRepository = Depends(get_instrument_repository),
    signal_repo: SignalRepository = Depends(get_signal_repository),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    advisory_client: AdvisoryClient | None = Depends(get_advisory_client),
    settings: Settings = Depends(get_settings),
) -> SignalGenerator:
    """Get signal generator instance."""
    return SignalGenerator(
        instrument_repo=instrument_repo,
        signal_repo=signal_repo,
        rate_limiter=rate_limiter,
        settings=settings,
        advisory_client=advisory_client,
    )


def get_insights_service(
    instrument_repo: InstrumentRepository = Depends(get_instrument_repository),
    advisory_client: AdvisoryClient | None = Depends(get_advisory_client),
) -> InsightsService:
    """Get insights service instance."""
    return InsightsService(
        instrument_repo=instrument_repo,
        advisory_client=advisory_client,
    )


def require_admin_secret(
    x_admin_secret: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Require the scheduler's shared secret.

    Raises:
        AuthenticationError: Missing or wrong X-Admin-Secret header (401)
    """
    # Constant-time comparison to prevent timing attacks
    if x_admin_secret and secrets.compare_digest(
        x_admin_secret, settings.admin_secret
    ):
        return

    logger.warning("Invalid or missing admin secret")
    raise AuthenticationError("Invalid admin secret")
