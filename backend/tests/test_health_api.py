"""Tests for health check endpoints"""

import pytest
from httpx import AsyncClient
from fastapi import status


@pytest.mark.asyncio
class TestBasicHealthCheck:
    """Test basic health check endpoint"""

    async def test_basic_health_check(self, async_client: AsyncClient):
        """Test GET /health endpoint"""
        response = await async_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()

        assert data["status"] == "healthy"
        assert "timestamp" in data


@pytest.mark.asyncio
class TestDetailedHealthCheck:
    """Test detailed health check endpoint"""

    async def test_detailed_health_check(self, async_client: AsyncClient):
        """Test GET /api/v1/health endpoint"""
        response = await async_client.get("/api/v1/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()

        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert data["services"]["database"] == "connected"
        assert data["status"] == "healthy"
