"""
Unit tests for InsightsService.

Tests cover:
- Template insights when no advisory service is configured
- Single AI analysis insight on success
- System notice on advisory failure
- Validation and not-found errors still raised
- Timeframe fallback
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from market_sync.core.exceptions import (
    ExternalServiceError,
    InstrumentNotFoundError,
    PersistenceError,
    ValidationError,
)
from market_sync.models.instrument import Instrument
from market_sync.services.insights_service import (
    UNAVAILABLE_MESSAGE,
    InsightsService,
    build_insights_prompt,
)

NOW = datetime(2025, 11, 3, 15, 0, tzinfo=UTC)


# ===== Fixtures =====


@pytest.fixture
def instrument():
    return Instrument(
        symbol="NVDA",
        price=480.25,
        change=-3.1,
        change_percent=-0.64,
        volume=40_000_000,
        market_cap=1_180_000_000_000,
        updated_at=NOW,
    )


@pytest.fixture
def instrument_repo(instrument):
    repo = Mock()
    repo.get_by_symbol = AsyncMock(return_value=instrument)
    return repo


@pytest.fixture
def advisory_client():
    client = Mock()
    client.complete = AsyncMock(return_value="Support near $470; sentiment mixed.")
    return client


@pytest.fixture
def service(instrument_repo, advisory_client):
    return InsightsService(instrument_repo, advisory_client, clock=lambda: NOW)


# ===== Tests =====


class TestTemplateInsights:
    """Test behavior without an advisory client."""

    @pytest.mark.asyncio
    async def test_three_templates(self, instrument_repo):
        """Test that three canned insights are returned."""
        service = InsightsService(instrument_repo, None, clock=lambda: NOW)

        insights = await service.fetch_insights("nvda", "1w")

        assert [i.type for i in insights] == [
            "Technical Analysis",
            "Market Sentiment",
            "Risk Assessment",
        ]
        assert [i.confidence for i in insights] == [0.78, 0.65, 0.72]
        assert "NVDA" in insights[0].message
        assert "1W chart" in insights[0].message
        assert all(i.timestamp == NOW for i in insights)
        instrument_repo.get_by_symbol.assert_not_called()

    @pytest.mark.asyncio
    async def test_templates_still_validate_symbol(self, instrument_repo):
        service = InsightsService(instrument_repo, None, clock=lambda: NOW)

        with pytest.raises(ValidationError):
            await service.fetch_insights("NOT A SYMBOL")


class TestAdvisoryInsights:
    """Test behavior with an advisory client."""

    @pytest.mark.asyncio
    async def test_single_ai_analysis(self, service, advisory_client):
        """Test that the reply becomes one AI Analysis insight."""
        insights = await service.fetch_insights("NVDA")

        assert len(insights) == 1
        assert insights[0].type == "AI Analysis"
        assert insights[0].message == "Support near $470; sentiment mixed."
        assert insights[0].confidence == 0.85
        kwargs = advisory_client.complete.call_args.kwargs
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 500

    @pytest.mark.asyncio
    async def test_unknown_timeframe_uses_1d(self, service, advisory_client):
        """Test that an unsupported timeframe is replaced with 1D in the prompt."""
        await service.fetch_insights("NVDA", "10Y")

        prompt = advisory_client.complete.call_args.args[1]
        assert "Timeframe: 1D" in prompt

    @pytest.mark.asyncio
    async def test_advisory_failure_returns_notice(self, service, advisory_client):
        """Test that a service failure is absorbed into a notice."""
        advisory_client.complete.side_effect = ExternalServiceError(
            "timed out", service="dashscope"
        )

        insights = await service.fetch_insights("NVDA")

        assert len(insights) == 1
        assert insights[0].type == "System Notice"
        assert insights[0].message == UNAVAILABLE_MESSAGE
        assert insights[0].confidence == 0.5

    @pytest.mark.asyncio
    async def test_storage_failure_returns_notice(self, service, instrument_repo):
        """Test that a lookup failure is absorbed into a notice."""
        instrument_repo.get_by_symbol.side_effect = PersistenceError("read failed")

        insights = await service.fetch_insights("NVDA")

        assert insights[0].type == "System Notice"

    @pytest.mark.asyncio
    async def test_missing_instrument_raises(self, service, instrument_repo, advisory_client):
        """Test that missing market data is reported as not found."""
        instrument_repo.get_by_symbol.return_value = None

        with pytest.raises(InstrumentNotFoundError) as exc_info:
            await service.fetch_insights("ZZZ")

        assert exc_info.value.symbol == "ZZZ"
        advisory_client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_symbol_raises(self, service, instrument_repo):
        with pytest.raises(ValidationError):
            await service.fetch_insights("")

        instrument_repo.get_by_symbol.assert_not_called()


class TestBuildInsightsPrompt:
    """Test prompt content."""

    def test_prompt_content(self, instrument):
        prompt = build_insights_prompt(instrument, "3M")

        assert "for NVDA" in prompt
        assert "Current Price: $480.25" in prompt
        assert "Change: -0.64%" in prompt
        assert "Volume: 40,000,000" in prompt
        assert "Market Cap: $1180.0B" in prompt
        assert "Timeframe: 3M" in prompt
