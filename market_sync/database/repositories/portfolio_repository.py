"""
Portfolio repository for aggregate valuation records.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ...core.exceptions import PersistenceError
from ...models.portfolio import Portfolio

logger = structlog.get_logger()


class PortfolioRepository:
    """Repository for portfolio data access operations."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize portfolio repository.

        Args:
            collection: MongoDB collection for portfolios
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create portfolio id (unique) and owner indexes."""
        await self.collection.create_index(
            [("portfolio_id", 1)],
            name="idx_portfolio_id",
            unique=True,
        )
        await self.collection.create_index(
            [("user_id", 1)],
            name="idx_user_portfolios",
        )
        logger.info("Portfolio indexes ensured")

    async def list_all(self) -> list[Portfolio]:
        """List every portfolio."""
        cursor = self.collection.find({})

        portfolios = []
        async for doc in cursor:
            doc.pop("_id", None)
            portfolios.append(Portfolio(**doc))

        return portfolios

    async def get_by_user(self, user_id: str) -> Portfolio | None:
        """
        Get a user's portfolio.

        Users own a single portfolio; if several exist the oldest wins.

        Args:
            user_id: Owner user ID (canonical lower-case UUID)

        Returns:
            Portfolio if found, None otherwise
        """
        doc = await self.collection.find_one(
            {"user_id": user_id}, sort=[("created_at", 1)]
        )

        if not doc:
            return None

        doc.pop("_id", None)
        return Portfolio(**doc)

    async def update_totals(self, portfolio: Portfolio) -> None:
        """
        Persist aggregate totals of a portfolio.

        Raises:
            PersistenceError: If the write fails or the portfolio is gone
        """
        try:
            result = await self.collection.update_one(
                {"portfolio_id": portfolio.portfolio_id},
                {
                    "$set": {
                        "total_value": portfolio.total_value,
                        "daily_change": portfolio.daily_change,
                        "daily_change_percent": portfolio.daily_change_percent,
                        "updated_at": portfolio.updated_at,
                    }
                },
            )
        except PyMongoError as e:
            raise PersistenceError(
                "Failed to update portfolio totals",
                portfolio_id=portfolio.portfolio_id,
                original_error=type(e).__name__,
            ) from e

        if result.matched_count == 0:
            raise PersistenceError(
                "Portfolio no longer exists",
                portfolio_id=portfolio.portfolio_id,
            )

        logger.info(
            "Portfolio totals updated",
            portfolio_id=portfolio.portfolio_id,
            total_value=portfolio.total_value,
            daily_change=portfolio.daily_change,
        )
