"""
Catalog API: Application-Level Tests
======================================

What we test:
    ✅ /health for both store backends
    ✅ X-Request-ID echo and generation
    ✅ Unexpected errors become a generic 500 envelope
    ✅ SQL-backed app end to end (migrations + seeding via lifespan helpers)
"""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from catalog import __version__
from catalog.main import create_app
from catalog.migrations import run_migrations, seed_categories, seed_products


class TestHealth:

    @pytest.mark.asyncio
    async def test_memory_store(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["store"] == "memory"
        assert body["database"] == "not_applicable"

    @pytest.mark.asyncio
    async def test_sql_store_connected(self, sqlite_settings):
        app = create_app(sqlite_settings)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")
        await app.state.store.engine.dispose()

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_sql_store_unreachable(self, sqlite_settings):
        app = create_app(sqlite_settings)
        failure = OperationalError("SELECT 1", {}, Exception("connection refused"))
        transport = ASGITransport(app=app)
        with patch("catalog.routes.health.ping", AsyncMock(side_effect=failure)):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/health")
        await app.state.store.engine.dispose()

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/categories")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed(self, test_client):
        response = await test_client.get("/categories", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"


class TestUnexpectedErrors:

    @pytest.mark.asyncio
    async def test_generic_500(self, test_app):
        test_app.state.category_service.list_categories = AsyncMock(
            side_effect=RuntimeError("boom")
        )
        transport = ASGITransport(app=test_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/categories")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An unexpected error occurred",
        }


class TestSqlBackedApp:

    @pytest.mark.asyncio
    async def test_seeded_catalog(self, sqlite_settings):
        app = create_app(sqlite_settings)
        store = app.state.store
        await run_migrations(store.engine)
        await seed_categories(store.session_factory)
        await seed_products(store.session_factory)

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            categories = await client.get("/categories")
            products = await client.get("/products", params={"category_id": 1})
            deleted = await client.delete("/categories/1")
            after = await client.get("/products/1")
        await store.engine.dispose()

        assert [c["name"] for c in categories.json()["data"]][:2] == ["Electronics", "Clothing"]
        assert len(products.json()["data"]) == 5
        assert products.json()["data"][0]["category"]["name"] == "Electronics"
        assert deleted.status_code == 200
        assert "category" not in after.json()["data"]
