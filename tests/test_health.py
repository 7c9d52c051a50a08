"""Tests for the /health and / liveness endpoints."""

from datetime import datetime

import pytest
from httpx import AsyncClient


@pytest.mark.anyio
async def test_health_returns_200(client: AsyncClient) -> None:
    """GET /health should return 200 with a healthy status and a timestamp."""
    response = await client.get("/health")
    assert response.status_code == 200

    body = response.json()
    assert body["status"] == "healthy"
    assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00")).tzinfo is not None


@pytest.mark.anyio
async def test_health_response_keys(client: AsyncClient) -> None:
    """GET /health response should contain exactly the expected keys."""
    response = await client.get("/health")
    assert set(response.json().keys()) == {"status", "timestamp"}


@pytest.mark.anyio
async def test_root_banner(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "GitHub PR relay is running!"
