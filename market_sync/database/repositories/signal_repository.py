"""
Trading signal repository.

Signals are insert-only; expiry is applied when reading.
"""

from datetime import datetime

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ...core.exceptions import PersistenceError
from ...models.trading_signal import TradingSignal

logger = structlog.get_logger()


class SignalRepository:
    """Repository for trading signal persistence."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize signal repository.

        Args:
            collection: MongoDB collection for trading signals
        """
        self.collection = collection

    async def ensure_indexes(self) -> None:
        """
        Create indexes for optimal query performance.

        Indexes:
        1. signal_id: Point lookups (unique)
        2. user_id + created_at: Listing a user's latest signals
        """
        await self.collection.create_index(
            [("signal_id", 1)],
            name="idx_signal_id",
            unique=True,
        )
        await self.collection.create_index(
            [("user_id", 1), ("created_at", -1)],
            name="idx_user_signals",
        )
        logger.info("Signal indexes ensured")

    async def create(self, signal: TradingSignal) -> TradingSignal:
        """
        Insert a new signal.

        Args:
            signal: Normalized signal to store

        Returns:
            The stored signal

        Raises:
            PersistenceError: If the insert fails
        """
        try:
            await self.collection.insert_one(signal.model_dump(mode="python"))
        except PyMongoError as e:
            logger.error(
                "Database insert error",
                signal_id=signal.signal_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceError(
                "Failed to save trading signal",
                symbol=signal.symbol,
                original_error=type(e).__name__,
            ) from e

        logger.info(
            "Signal stored",
            signal_id=signal.signal_id,
            user_id=signal.user_id,
            symbol=signal.symbol,
        )

        return signal

    async def list_active(
        self, user_id: str, now: datetime, limit: int = 50
    ) -> list[TradingSignal]:
        """
        List a user's unexpired signals, newest first.

        Args:
            user_id: User identifier
            now: Reference instant for expiry
            limit: Maximum number of signals

        Returns:
            Signals with expires_at later than now
        """
        cursor = (
            self.collection.find({"user_id": user_id, "expires_at": {"$gt": now}})
            .sort("created_at", -1)
            .limit(limit)
        )

        signals = []
        async for doc in cursor:
            doc.pop("_id", None)
            signals.append(TradingSignal(**doc))

        return signals
