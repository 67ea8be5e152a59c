"""
Tests for the synchronization worker entry point.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock, patch

import pytest

from market_sync.core.exceptions import NotFoundError
from market_sync.models.sync_summary import SyncSummary
from market_sync.services.market_sync_service import MarketSyncService
from market_sync.workers import sync_market_data


@pytest.fixture
def mongodb():
    db = Mock()
    db.connect = AsyncMock()
    db.disconnect = AsyncMock()
    db.get_collection = Mock(side_effect=lambda name: Mock(name=name))
    return db


class TestBuildSyncService:
    """Test wiring."""

    def test_uses_expected_collections(self, mongodb, settings):
        service = sync_market_data.build_sync_service(mongodb, settings)

        assert isinstance(service, MarketSyncService)
        requested = [c.args[0] for c in mongodb.get_collection.call_args_list]
        assert requested == ["market_data", "holdings", "portfolios"]


class TestMain:
    """Test exit codes and cleanup."""

    @pytest.mark.asyncio
    async def test_success_returns_zero(self, mongodb):
        service = Mock()
        service.run_sync_pass = AsyncMock(
            return_value=SyncSummary(
                updated_count=2, timestamp=datetime(2025, 11, 3, tzinfo=UTC)
            )
        )

        with (
            patch.object(sync_market_data, "MongoDB", return_value=mongodb),
            patch.object(sync_market_data, "build_sync_service", return_value=service),
        ):
            exit_code = await sync_market_data.main()

        assert exit_code == 0
        mongodb.connect.assert_awaited_once()
        mongodb.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_returns_one(self, mongodb):
        service = Mock()
        service.run_sync_pass = AsyncMock(
            side_effect=NotFoundError("No market data found to update")
        )

        with (
            patch.object(sync_market_data, "MongoDB", return_value=mongodb),
            patch.object(sync_market_data, "build_sync_service", return_value=service),
        ):
            exit_code = await sync_market_data.main()

        assert exit_code == 1
        mongodb.disconnect.assert_awaited_once()
