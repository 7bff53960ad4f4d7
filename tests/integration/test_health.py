"""Integration tests for the health endpoint."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from storefront.infrastructure.persistence.database import Database


pytestmark = pytest.mark.integration


class TestHealth:
    """Test GET /health."""

    async def test_healthy(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "status": "healthy",
            "version": "0.1.0",
            "environment": "testing",
            "database": "healthy",
        }

    async def test_degraded_when_database_is_down(
        self,
        async_client: AsyncClient,
        database: Database,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a failing database still answers 200 but reports degraded."""
        monkeypatch.setattr(database, "health_check", AsyncMock(return_value=False))

        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unhealthy"
