"""
MongoDB handle for the market sync record store.

Holds one client per process. Collections are addressed by the names in
COLLECTIONS; repositories wrap them.
"""

from typing import Any

import structlog
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from ..core.exceptions import ConfigurationError, DatabaseError

logger = structlog.get_logger()

MARKET_DATA = "market_data"
HOLDINGS = "holdings"
PORTFOLIOS = "portfolios"
TRADING_SIGNALS = "trading_signals"

COLLECTIONS = (MARKET_DATA, HOLDINGS, PORTFOLIOS, TRADING_SIGNALS)


def parse_database_name(mongodb_url: str) -> str:
    """
    Extract the database name from a MongoDB URL.

    Raises:
        ConfigurationError: URL has no usable database path
    """
    path = mongodb_url.rsplit("/", 1)[-1]
    database_name = path.split("?", 1)[0]

    if not database_name or any(char in database_name for char in "&=:@"):
        raise ConfigurationError(
            f"Database name '{database_name}' is empty or contains invalid characters. "
            "Expected mongodb://host/dbname?params",
            parsed_db_name=database_name,
        )
    return database_name


class MongoDB:
    """Async MongoDB connection for instruments, holdings, portfolios and signals."""

    def __init__(self) -> None:
        self.client: AsyncIOMotorClient | None = None
        self.database: AsyncIOMotorDatabase | None = None

    async def connect(self, mongodb_url: str) -> None:
        """
        Open the client and verify it with a ping.

        Raises:
            ConfigurationError: Malformed URL
            DatabaseError: Server unreachable
        """
        database_name = parse_database_name(mongodb_url)

        try:
            self.client = AsyncIOMotorClient(mongodb_url, tz_aware=True)
            self.database = self.client[database_name]
            await self.client.admin.command("ping")
        except Exception as e:
            logger.error(
                "MongoDB connection failed",
                database=database_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DatabaseError(
                "MongoDB connection failed",
                database=database_name,
                original_error=type(e).__name__,
            ) from e

        logger.info("MongoDB connection established", database=database_name)

    async def disconnect(self) -> None:
        """Close the client if open."""
        if self.client is None:
            return
        self.client.close()
        self.client = None
        self.database = None
        logger.info("MongoDB connection closed")

    async def health_check(self) -> dict[str, Any]:
        """Ping the server and report approximate record counts."""
        if self.client is None or self.database is None:
            return {"connected": False, "error": "No client connection"}

        try:
            await self.client.admin.command("ping")
            counts = {
                name: await self.database[name].estimated_document_count()
                for name in COLLECTIONS
            }
        except Exception as e:
            logger.error("MongoDB health check failed", error=str(e))
            return {"connected": False, "error": str(e)}

        return {
            "connected": True,
            "database": self.database.name,
            "documents": counts,
        }

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Get one of the service's collections.

        Raises:
            DatabaseError: Not connected
            ConfigurationError: Unknown collection name
        """
        if collection_name not in COLLECTIONS:
            raise ConfigurationError(
                f"Unknown collection: {collection_name}",
                collection_name=collection_name,
            )
        if self.database is None:
            raise DatabaseError(
                "Cannot get collection: database connection not established",
                collection_name=collection_name,
            )
        return self.database[collection_name]
