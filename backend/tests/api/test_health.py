"""Tests for health check endpoints."""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from fastapi.testclient import TestClient

from api.app import create_app


def create_client_mock(session=None):
    """Supabase client mock with an async auth API."""
    client = MagicMock()
    client.auth.get_session = AsyncMock(return_value=session)
    client.auth.sign_out = AsyncMock()
    return client


@pytest.fixture
def app():
    return create_app()


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, app):
        """Health endpoint should return 200 with status."""
        response = TestClient(app).get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self, app):
        """Health response should have correct structure."""
        data = TestClient(app).get("/api/health").json()
        assert set(data.keys()) == {"status", "version"}

    def test_readiness_before_startup(self, app):
        """Without the lifespan the container is not started."""
        response = TestClient(app).get("/api/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "not_ready"
        assert set(data.keys()) == {"status", "database", "session"}

    @patch("shared.database.get_supabase_client", new_callable=AsyncMock)
    def test_readiness_after_startup(self, mock_get_client, app):
        """The lifespan starts the session engine; ready reports its state."""
        mock_get_client.return_value = create_client_mock()
        with TestClient(app) as client:
            data = client.get("/api/ready").json()
        assert data["status"] == "ready"
        assert data["database"] == "connected"
        assert data["session"] == "unauthenticated"

    @patch("shared.database.get_supabase_client", new_callable=AsyncMock)
    def test_readiness_degraded_on_connection_error(self, mock_get_client, app):
        """A probe that cannot reach the backend reports degraded."""
        client_mock = create_client_mock()
        client_mock.auth.get_session.side_effect = OSError("Connection refused")
        mock_get_client.return_value = client_mock
        with TestClient(app) as client:
            data = client.get("/api/ready").json()
        assert data["status"] == "degraded"
        assert data["session"] == "connection_error"
