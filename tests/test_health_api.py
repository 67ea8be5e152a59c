"""
Tests for GET /api/health.
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from market_sync.api.dependencies.services import get_mongodb, get_redis
from market_sync.core.config import get_settings
from market_sync.main import create_app


def make_dependency(connected: bool) -> Mock:
    dependency = Mock()
    dependency.health_check = AsyncMock(return_value={"connected": connected})
    return dependency


@pytest.fixture
def make_client(settings):
    def _make(mongodb_connected: bool, redis_connected: bool) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_mongodb] = lambda: make_dependency(mongodb_connected)
        app.dependency_overrides[get_redis] = lambda: make_dependency(redis_connected)
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app)

    return _make


class TestHealthEndpoint:
    """Test health reporting."""

    def test_all_connected(self, make_client):
        response = make_client(True, True).get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["environment"] == "test"
        assert body["configuration"] == {
            "database": "market_sync",
            "advisory_configured": False,
        }

    def test_redis_down_is_degraded(self, make_client):
        response = make_client(True, False).get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["dependencies"]["redis"] == {"connected": False}
