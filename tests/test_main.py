"""Tests for the FastAPI service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from uptime_checker import main as service
from uptime_checker.config import AppConfig
from uptime_checker.exceptions import TransportError


@pytest.fixture
def make_client(tmp_path):
    """Create a test client with fresh state and a fake fetcher."""

    def _make(env_token=None):
        state = service.reset_state(AppConfig(config_dir=tmp_path, env_token=env_token))
        fetcher = MagicMock()
        fetcher.fetch = AsyncMock(return_value=[])
        state.orchestrator.fetcher = fetcher
        return TestClient(service.app), fetcher

    return _make


def test_health_check(make_client):
    """Test the health check endpoint."""
    client, _ = make_client()

    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["token_configured"] is False
    assert data["last_outcome"] is None
    assert isinstance(data["uptime_seconds"], (int, float))


def test_monitors_before_first_refresh(make_client):
    """Test that monitors are unavailable until a refresh completes."""
    client, _ = make_client(env_token="ur123")

    response = client.get("/monitors")
    assert response.status_code == 503


def test_refresh_without_token(make_client):
    """Test that refreshing without a token reports the configuration error."""
    client, fetcher = make_client()

    response = client.post("/refresh")
    assert response.status_code == 503
    assert "--token" in response.json()["detail"]
    fetcher.fetch.assert_not_awaited()


def test_refresh_and_get_monitors(make_client, make_monitor):
    """Test a refresh followed by reading the stored result."""
    client, fetcher = make_client(env_token="ur123")
    fetcher.fetch.return_value = [make_monitor(1), make_monitor(2, "API")]

    response = client.post("/refresh")
    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "fetched"
    assert data["using_cache"] is False
    assert [m["id"] for m in data["monitors"]] == [1, 2]
    fetcher.fetch.assert_awaited_once_with("ur123")

    response = client.get("/monitors")
    assert response.status_code == 200
    assert response.json() == data

    health = client.get("/health").json()
    assert health["token_configured"] is True
    assert health["last_outcome"] == "fetched"


def test_refresh_failure_is_reported_in_result(make_client):
    """Test that a failed fetch without cache is a result, not an HTTP error."""
    client, fetcher = make_client(env_token="ur123")
    fetcher.fetch.side_effect = TransportError("offline")

    response = client.post("/refresh")
    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "error"
    assert "no cached data available" in data["error"]
    assert data["monitors"] is None
