"""Tests for error rendering and the health endpoint."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from alumnae.api.errors import STORE_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(async_client):
    response = await async_client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


@pytest.mark.asyncio
async def test_store_failure_is_generic_500(async_client):
    with patch(
        "alumnae.services.batch_year.BatchYearService.list",
        new=AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db down"))),
    ):
        response = await async_client.get("/api/batch-years")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": STORE_ERROR_MESSAGE}


@pytest.mark.asyncio
async def test_health_reports_database(async_client):
    with patch("alumnae.api.health.check_db_connection", new=AsyncMock(return_value=True)):
        response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


@pytest.mark.asyncio
async def test_health_unavailable_when_database_down(async_client):
    with patch("alumnae.api.health.check_db_connection", new=AsyncMock(return_value=False)):
        response = await async_client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
