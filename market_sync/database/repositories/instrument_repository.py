"""
Instrument repository for market data records.
"""

from datetime import datetime

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ...core.exceptions import PersistenceError
from ...models.instrument import Instrument

logger = structlog.get_logger()


class InstrumentRepository:
    """Repository for market data access keyed by symbol."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize instrument repository.

        Args:
            collection: MongoDB collection for market data
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """Create the unique symbol index."""
        await self.collection.create_index(
            [("symbol", 1)],
            name="idx_symbol",
            unique=True,
        )
        logger.info("Instrument indexes ensured")

    async def list_all(self) -> list[Instrument]:
        """
        List every known instrument.

        Returns:
            Instruments sorted by symbol
        """
        cursor = self.collection.find({}).sort("symbol", 1)

        instruments = []
        async for doc in cursor:
            doc.pop("_id", None)
            instruments.append(Instrument(**doc))

        return instruments

    async def get_by_symbol(self, symbol: str) -> Instrument | None:
        """
        Get instrument by symbol.

        Args:
            symbol: Ticker symbol (already normalized to upper case)

        Returns:
            Instrument if found, None otherwise
        """
        doc = await self.collection.find_one({"symbol": symbol})

        if not doc:
            return None

        doc.pop("_id", None)
        return Instrument(**doc)

    async def update_quote(
        self,
        symbol: str,
        price: float,
        change: float,
        change_percent: float,
        volume: int,
        updated_at: datetime,
    ) -> Instrument | None:
        """
        Write a new quote for a symbol.

        Args:
            symbol: Ticker symbol
            price: New price
            change: Absolute change vs previous price
            change_percent: Percent change vs previous price
            volume: New traded volume
            updated_at: Quote timestamp

        Returns:
            Updated instrument, or None if the symbol no longer exists

        Raises:
            PersistenceError: If the write fails
        """
        try:
            result = await self.collection.find_one_and_update(
                {"symbol": symbol},
                {
                    "$set": {
                        "price": price,
                        "change": change,
                        "change_percent": change_percent,
                        "volume": volume,
                        "updated_at": updated_at,
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PersistenceError(
                f"Failed to update market data for {symbol}",
                symbol=symbol,
                original_error=type(e).__name__,
            ) from e

        if not result:
            return None

        result.pop("_id", None)
        return Instrument(**result)
