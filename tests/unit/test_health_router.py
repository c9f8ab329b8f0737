"""Unit tests for routers/health.py."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from catalog.client import CatalogClient
from routers.health import _check_catalog_api, _run_check
from tests.unit.conftest import override_deps

# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


class TestCheckCatalogApi:
    @pytest.mark.asyncio
    async def test_ok(self):
        client = AsyncMock(spec=CatalogClient)
        client.check_api = AsyncMock(return_value=True)
        assert await _check_catalog_api(client) == "ok"

    @pytest.mark.asyncio
    async def test_error(self):
        client = AsyncMock(spec=CatalogClient)
        client.check_api = AsyncMock(return_value=False)
        assert await _check_catalog_api(client) == "error"

    @pytest.mark.asyncio
    async def test_none_client(self):
        assert await _check_catalog_api(None) == "unavailable"


class TestRunCheck:
    @pytest.mark.asyncio
    async def test_success(self):
        async def ok_check():
            return "ok"

        assert await _run_check(ok_check()) == "ok"

    @pytest.mark.asyncio
    async def test_timeout(self):
        import asyncio

        async def slow_check():
            await asyncio.sleep(100)
            return "ok"

        with patch("routers.health.CHECK_TIMEOUT", 0.01):
            result = await _run_check(slow_check())
        assert result == "timeout"


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def _health(self, client, mock_settings):
        from config.settings import get_settings
        from core.dependencies import get_catalog_client
        from main import app

        with override_deps(app, {get_catalog_client: client, get_settings: mock_settings}):
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as http:
                return await http.get("/health")

    @pytest.mark.asyncio
    async def test_healthy(self, mock_catalog_client, mock_settings):
        resp = await self._health(mock_catalog_client, mock_settings)
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.json()["services"] == {"catalog_api": "ok"}

    @pytest.mark.asyncio
    async def test_unconfigured_is_degraded(self, mock_settings):
        resp = await self._health(None, mock_settings)
        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_api_down_is_unhealthy(self, mock_catalog_client, mock_settings):
        mock_catalog_client.check_api = AsyncMock(return_value=False)
        resp = await self._health(mock_catalog_client, mock_settings)
        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_reports_version(self, mock_catalog_client, mock_settings):
        resp = await self._health(mock_catalog_client, mock_settings)
        assert resp.json()["version"] == mock_settings.app_version
