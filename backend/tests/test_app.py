"""
Tests for the application shell: health, metrics and request tracing.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient, owner_headers, pending_booking):
    booking_id = pending_booking.id
    await client.patch(
        f"/api/v1/bookings/{booking_id}/status",
        json={"status": "confirmed"},
        headers=owner_headers,
    )

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_transitions_total" in response.text
    assert 'to_status="confirmed"' in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_is_generated(client: AsyncClient):
    response = await client.get("/")
    assert len(response.headers["X-Request-ID"]) == 12
