"""
Holding repository for portfolio positions.
"""

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ...core.exceptions import PersistenceError
from ...models.holding import Holding

logger = structlog.get_logger()


class HoldingRepository:
    """Repository for holding data access operations."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize holding repository.

        Args:
            collection: MongoDB collection for holdings
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """
        Create indexes for optimal query performance.

        Indexes:
        1. holding_id: Point lookups and updates (unique)
        2. portfolio_id: Listing a portfolio's holdings during sync
        3. symbol: Finding holdings affected by a price change
        """
        await self.collection.create_index(
            [("holding_id", 1)],
            name="idx_holding_id",
            unique=True,
        )
        await self.collection.create_index(
            [("portfolio_id", 1)],
            name="idx_portfolio_holdings",
        )
        await self.collection.create_index(
            [("symbol", 1)],
            name="idx_holding_symbol",
        )

        logger.info("Holding indexes ensured")

    async def create(self, holding: Holding) -> Holding:
        """
        Insert a new holding.

        Args:
            holding: Holding to store

        Returns:
            The stored holding

        Raises:
            PersistenceError: If the insert fails
        """
        try:
            await self.collection.insert_one(holding.model_dump(mode="python"))
        except PyMongoError as e:
            logger.error(
                "Database insert error",
                holding_id=holding.holding_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceError(
                "Failed to save stock to portfolio",
                symbol=holding.symbol,
                original_error=type(e).__name__,
            ) from e

        logger.info(
            "Holding created",
            holding_id=holding.holding_id,
            portfolio_id=holding.portfolio_id,
            symbol=holding.symbol,
            quantity=holding.quantity,
        )

        return holding

    async def list_by_portfolio(self, portfolio_id: str) -> list[Holding]:
        """
        List all holdings of a portfolio.

        Args:
            portfolio_id: Portfolio identifier

        Returns:
            Holdings in insertion order
        """
        cursor = self.collection.find({"portfolio_id": portfolio_id})

        holdings = []
        async for holding_dict in cursor:
            holding_dict.pop("_id", None)
            holdings.append(Holding(**holding_dict))

        return holdings

    async def update_valuation(self, holding: Holding) -> None:
        """
        Persist recomputed price and P/L fields of a holding.

        Args:
            holding: Holding carrying the new valuation

        Raises:
            PersistenceError: If the write fails or the holding is gone
        """
        update_dict = {
            "current_price": holding.current_price,
            "market_value": holding.market_value,
            "unrealized_pnl": holding.unrealized_pnl,
            "unrealized_pnl_percent": holding.unrealized_pnl_percent,
            "updated_at": holding.updated_at,
        }

        try:
            result = await self.collection.update_one(
                {"holding_id": holding.holding_id},
                {"$set": update_dict},
            )
        except PyMongoError as e:
            raise PersistenceError(
                "Failed to update holding valuation",
                holding_id=holding.holding_id,
                original_error=type(e).__name__,
            ) from e

        if result.matched_count == 0:
            raise PersistenceError(
                "Holding no longer exists",
                holding_id=holding.holding_id,
            )

        logger.debug(
            "Holding valuation updated",
            holding_id=holding.holding_id,
            symbol=holding.symbol,
            current_price=holding.current_price,
            unrealized_pnl=holding.unrealized_pnl,
        )
