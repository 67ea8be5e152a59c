"""
Market data synchronization worker.

Runs one synchronization pass (price update -> holding revaluation ->
portfolio aggregation) and exits.

Run manually or via cron/Kubernetes CronJob:
    python -m market_sync.workers.sync_market_data

Environment variables:
    MONGODB_URL: MongoDB connection string (required)
"""

import asyncio
import sys

import structlog

from ..core.config import Settings, get_settings
from ..database.mongodb import HOLDINGS, MARKET_DATA, PORTFOLIOS, MongoDB
from ..database.repositories.holding_repository import HoldingRepository
from ..database.repositories.instrument_repository import InstrumentRepository
from ..database.repositories.portfolio_repository import PortfolioRepository
from ..services.market_sync_service import MarketSyncService

logger = structlog.get_logger()


def build_sync_service(mongodb: MongoDB, settings: Settings) -> MarketSyncService:
    """Wire the synchronization service against a connected database."""
    return MarketSyncService(
        instrument_repo=InstrumentRepository(mongodb.get_collection(MARKET_DATA)),
        holding_repo=HoldingRepository(mongodb.get_collection(HOLDINGS)),
        portfolio_repo=PortfolioRepository(mongodb.get_collection(PORTFOLIOS)),
        settings=settings,
    )


async def main() -> int:
    """
    Main entry point for the synchronization worker.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    settings: Settings = get_settings()
    mongodb = MongoDB()

    try:
        await mongodb.connect(settings.mongodb_url)
        logger.info("MongoDB connected")

        summary = await build_sync_service(mongodb, settings).run_sync_pass()

        logger.info(
            "Synchronization worker finished successfully",
            updated_count=summary.updated_count,
            failed_symbols=summary.failed_symbols,
            timestamp=summary.timestamp.isoformat(),
        )
        return 0

    except Exception as e:
        logger.error("Synchronization worker failed", error=str(e), exc_info=True)
        return 1

    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
