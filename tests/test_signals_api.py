"""
Tests for the trading signal endpoints.

A real SignalGenerator runs behind the routes with mocked repositories
and in-memory rate limit counters.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from market_sync.api.dependencies.services import get_signal_generator
from market_sync.core.exceptions import PersistenceError
from market_sync.core.rate_limiter import RateLimiter
from market_sync.main import create_app
from market_sync.models.trading_signal import SignalType, TradingSignal
from market_sync.services.signals import SignalGenerator

USER_ID = "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11"


# ===== Fixtures =====


@pytest.fixture
def instrument_repo(aapl):
    repo = Mock()

    async def get_by_symbol(symbol):
        return aapl if symbol == "AAPL" else None

    repo.get_by_symbol = AsyncMock(side_effect=get_by_symbol)
    return repo


@pytest.fixture
def signal_repo():
    repo = Mock()
    repo.create = AsyncMock(side_effect=lambda signal: signal)
    repo.list_active = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def generator(instrument_repo, signal_repo, fake_redis, settings, fixed_clock):
    return SignalGenerator(
        instrument_repo,
        signal_repo,
        RateLimiter(fake_redis),
        settings,
        clock=fixed_clock,
    )


@pytest.fixture
def client(generator):
    app = create_app()
    app.dependency_overrides[get_signal_generator] = lambda: generator
    return TestClient(app)


# ===== POST /api/signals/generate =====


class TestGenerateSignalEndpoint:
    """Test POST /api/signals/generate."""

    def test_success(self, client):
        response = client.post(
            "/api/signals/generate", json={"symbol": "aapl", "user_id": USER_ID}
        )

        assert response.status_code == 200
        signal = response.json()["signal"]
        assert signal["symbol"] == "AAPL"
        assert signal["signal_type"] == "BUY"
        assert signal["confidence"] == 0.75
        assert signal["price_target"] == pytest.approx(110.0)
        assert signal["stop_loss"] == pytest.approx(95.0)
        assert signal["signal_id"].startswith("signal_")

    def test_camel_case_user_id_accepted(self, client):
        response = client.post(
            "/api/signals/generate", json={"symbol": "AAPL", "userId": USER_ID}
        )

        assert response.status_code == 200

    def test_invalid_symbol_is_400(self, client, signal_repo):
        response = client.post(
            "/api/signals/generate", json={"symbol": "AAPL!!", "user_id": USER_ID}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "validation_error"
        assert body["detail"].startswith("Invalid symbol")
        signal_repo.create.assert_not_called()

    def test_missing_fields_are_400(self, client):
        response = client.post("/api/signals/generate", json={})

        assert response.status_code == 400

    def test_numeric_symbol_is_400(self, client, signal_repo):
        response = client.post(
            "/api/signals/generate", json={"symbol": 42, "user_id": USER_ID}
        )

        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"
        signal_repo.create.assert_not_called()

    def test_non_string_user_id_is_400(self, client):
        response = client.post(
            "/api/signals/generate", json={"symbol": "AAPL", "user_id": 12345}
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid user ID")

    def test_unknown_symbol_is_404(self, client):
        response = client.post(
            "/api/signals/generate", json={"symbol": "ZZZZ", "user_id": USER_ID}
        )

        assert response.status_code == 404
        body = response.json()
        assert body["error_type"] == "instrument_not_found"
        assert body["detail"] == "Market data not available for ZZZZ"

    def test_sixth_request_is_429(self, client):
        for _ in range(5):
            ok = client.post(
                "/api/signals/generate", json={"symbol": "AAPL", "user_id": USER_ID}
            )
            assert ok.status_code == 200

        response = client.post(
            "/api/signals/generate", json={"symbol": "AAPL", "user_id": USER_ID}
        )

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "3600"
        body = response.json()
        assert body["error_type"] == "rate_limit_error"
        assert body["retry_after"] == 3600

    def test_persistence_failure_is_500(self, client, signal_repo):
        signal_repo.create.side_effect = PersistenceError("Failed to save trading signal")

        response = client.post(
            "/api/signals/generate", json={"symbol": "AAPL", "user_id": USER_ID}
        )

        assert response.status_code == 500
        assert response.json()["error_type"] == "persistence_error"


# ===== GET /api/signals/{user_id} =====


class TestListSignalsEndpoint:
    """Test GET /api/signals/{user_id}."""

    def test_lists_active_signals(self, client, signal_repo):
        now = datetime(2025, 11, 3, 14, 30, tzinfo=UTC)
        signal_repo.list_active.return_value = [
            TradingSignal(
                signal_id="signal_1",
                user_id=USER_ID,
                symbol="AAPL",
                signal_type=SignalType.HOLD,
                confidence=0.6,
                price_target=105.0,
                stop_loss=95.0,
                reasoning="Consolidating",
                created_at=now,
                expires_at=now + timedelta(hours=24),
            )
        ]

        response = client.get(f"/api/signals/{USER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["signals"][0]["signal_id"] == "signal_1"

    def test_invalid_user_id_is_400(self, client):
        response = client.get("/api/signals/not-a-uuid")

        assert response.status_code == 400
