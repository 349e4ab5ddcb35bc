"""Health endpoint and middleware tests (no database needed)."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(api_client: AsyncClient) -> None:
    """GET /health returns 200 with healthy status."""
    response = await api_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_version(api_client: AsyncClient) -> None:
    response = await api_client.get("/version")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == "0.1.0"
    assert "environment" in data


@pytest.mark.asyncio
async def test_request_id_generated(api_client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await api_client.get("/health")
    assert len(response.headers["x-request-id"]) == 36


@pytest.mark.asyncio
async def test_request_id_preserved(api_client: AsyncClient) -> None:
    response = await api_client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_unknown_route_is_json_404(api_client: AsyncClient) -> None:
    response = await api_client.get("/api/v1/nope")
    assert response.status_code == 404
    assert "detail" in response.json()
