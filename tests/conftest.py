"""
Catalog API: Test Configuration (conftest.py)
===============================================

Shared fixtures for the test suite.

Fixture Hierarchy (all function-scoped):
    ├── memory_store:       fresh, unseeded InMemoryStore
    ├── memory_categories / memory_products: repositories sharing memory_store
    ├── sqlite_engine:      aiosqlite engine on a temp file, schema created
    ├── session_factory:    async_sessionmaker bound to sqlite_engine
    ├── sql_categories / sql_products: SQL repositories on session_factory
    ├── test_app:           create_app() with the in-memory store, no seed data
    └── test_client:        httpx AsyncClient talking to test_app over ASGI
"""

import os

# Before any catalog import: the module-level app in catalog.main is built
# from the environment.
os.environ["STORE_BACKEND"] = "memory"
os.environ["SEED_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from catalog.config import Settings
from catalog.database import create_engine, create_session_factory
from catalog.migrations import run_migrations
from catalog.repositories.memory import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    InMemoryStore,
)
from catalog.repositories.sql import SqlCategoryRepository, SqlProductRepository


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Store
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def memory_categories(memory_store):
    return InMemoryCategoryRepository(memory_store)


@pytest.fixture
def memory_products(memory_store):
    return InMemoryProductRepository(memory_store)


# ══════════════════════════════════════════════════════════════════════════
# SQL Store (SQLite file per test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sqlite_settings(tmp_path):
    """Settings pointing at a throwaway SQLite database file."""
    return Settings(
        store_backend="sql",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog_test.db'}",
        seed_data=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def sqlite_engine(sqlite_settings):
    """
    Engine with the schema already created.

    A file (not :memory:) database, so every pooled connection sees the
    same tables.
    """
    engine = create_engine(sqlite_settings)
    await run_migrations(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return create_session_factory(sqlite_engine)


@pytest.fixture
def sql_categories(session_factory):
    return SqlCategoryRepository(session_factory)


@pytest.fixture
def sql_products(session_factory):
    return SqlProductRepository(session_factory)


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_app():
    from catalog.main import create_app

    return create_app(Settings(store_backend="memory", seed_data=False))


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight into the app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
