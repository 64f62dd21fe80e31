"""Contract tests for health, metrics and request middleware."""
import pytest
from httpx import AsyncClient

from archledger.core.config import get_settings


@pytest.mark.asyncio
async def test_health_returns_ok(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_metrics_open_outside_production(client: AsyncClient):
    await client.get("/api/health")

    response = await client.get("/api/metrics")

    assert response.status_code == 200
    assert "archledger_http_requests_total" in response.text


@pytest.mark.asyncio
async def test_metrics_require_token_in_production(client: AsyncClient, monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "environment", "production")
    monkeypatch.setattr(settings, "metrics_token", "scrape-me")

    assert (await client.get("/api/metrics")).status_code == 403
    response = await client.get("/api/metrics", headers={"Authorization": "Bearer scrape-me"})
    assert response.status_code == 200
