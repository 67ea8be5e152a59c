"""
Shared fixtures for the market sync test suite.
"""

import os

# Must be set before market_sync.main builds the app (skips SlowAPIMiddleware)
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402

from market_sync.api.dependencies.rate_limit import limiter  # noqa: E402
from market_sync.core.config import Settings  # noqa: E402
from market_sync.models.holding import Holding  # noqa: E402
from market_sync.models.instrument import Instrument  # noqa: E402
from market_sync.models.portfolio import Portfolio  # noqa: E402

VALID_USER_ID = "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11"
FIXED_NOW = datetime(2025, 11, 3, 14, 30, tzinfo=UTC)


class FakeCursor:
    """Minimal stand-in for a motor cursor: chainable sort/limit, async iteration."""

    def __init__(self, docs):
        self._docs = [dict(doc) for doc in docs]

    def sort(self, *args, **kwargs):
        return self

    def limit(self, *args, **kwargs):
        return self

    def __aiter__(self):
        self._iter = iter(self._docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeRedisClient:
    """In-memory INCR/EXPIRE/TTL with a manual window reset."""

    def __init__(self):
        self.counts: dict[str, int] = {}
        self.ttls: dict[str, int] = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True

    async def ttl(self, key):
        return self.ttls.get(key, -2)

    def end_window(self):
        """Simulate every key expiring."""
        self.counts.clear()
        self.ttls.clear()


class FakeRedisCache:
    def __init__(self, client=None):
        self.client = client


@pytest.fixture
def make_cursor():
    """Factory for fake motor cursors."""
    return FakeCursor


@pytest.fixture
def fake_redis():
    """Redis cache wrapper around an in-memory client."""
    return FakeRedisCache(FakeRedisClient())


@pytest.fixture
def settings():
    """Test settings with explicit values."""
    return Settings(
        environment="test",
        admin_secret="test-admin-secret",
        dashscope_api_key="",
        price_volatility=0.02,
        sync_concurrency=4,
        signal_rate_limit_requests=5,
        signal_rate_limit_window_seconds=3600,
        signal_ttl_hours=24,
        signal_reasoning_max_length=1000,
    )


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def aapl():
    """AAPL instrument, +3% on the day."""
    return Instrument(
        symbol="AAPL",
        price=100.0,
        change=2.91,
        change_percent=3.0,
        volume=50_000_000,
        market_cap=2_950_000_000_000,
        updated_at=FIXED_NOW,
    )


@pytest.fixture
def sample_portfolio():
    """Portfolio previously valued at 10,000."""
    return Portfolio(
        portfolio_id="portfolio_1",
        user_id=VALID_USER_ID,
        total_value=10_000.0,
    )


@pytest.fixture
def sample_holding():
    """10 AAPL at 80 average cost, not yet valued."""
    return Holding(
        holding_id="holding_1",
        portfolio_id="portfolio_1",
        user_id=VALID_USER_ID,
        symbol="AAPL",
        quantity=10,
        average_cost=80.0,
    )


@pytest.fixture(autouse=True)
def disable_ip_rate_limit():
    """Keep slowapi's shared in-memory counters out of API tests."""
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous
