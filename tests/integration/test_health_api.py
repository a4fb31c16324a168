# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the application factory and health endpoint."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from silveredge import __version__
from silveredge.api import create_app
from silveredge.api.routes.health import ComponentHealth


@pytest.fixture
def client():
    """Client over the full application, without running its lifespan."""
    return TestClient(create_app())


class TestHealthCheck:
    """Tests for GET /health."""

    @patch("silveredge.api.routes.health.check_database", new_callable=AsyncMock)
    def test_healthy(self, mock_check, client):
        mock_check.return_value = ComponentHealth(status="healthy", latency_ms=1.5)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["database"]["latency_ms"] == 1.5

    @patch("silveredge.api.routes.health.check_database", new_callable=AsyncMock)
    def test_unhealthy_database(self, mock_check, client):
        mock_check.return_value = ComponentHealth(status="unhealthy", message="connection refused")

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"


class TestRequestContext:
    """Tests for the request id middleware."""

    @patch("silveredge.api.routes.health.check_database", new_callable=AsyncMock)
    def test_echoes_request_id(self, mock_check, client):
        mock_check.return_value = ComponentHealth(status="healthy")

        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    @patch("silveredge.api.routes.health.check_database", new_callable=AsyncMock)
    def test_generates_request_id(self, mock_check, client):
        mock_check.return_value = ComponentHealth(status="healthy")

        response = client.get("/health")

        assert response.headers["X-Request-ID"]
