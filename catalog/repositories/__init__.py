# Repositories package init
"""
Catalog API: Repository Layer
===============================

What:  Storage for categories and products behind abstract interfaces.

Inventory:
    - base.py:    CategoryRepository / ProductRepository (abstract contracts)
    - memory.py:  InMemoryStore + map-backed repositories (single lock)
    - sql.py:     async SQLAlchemy repositories (session per operation)

`build_store(settings)` is the one place that decides which implementation
runs, based on Settings.store_backend.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from catalog.config import Settings
from catalog.repositories.base import CategoryRepository, ProductRepository

logger = logging.getLogger(__name__)


@dataclass
class Store:
    """The repositories chosen at startup, plus the engine when SQL-backed."""

    backend: str
    categories: CategoryRepository
    products: ProductRepository
    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def build_store(settings: Settings) -> Store:
    """
    Construct the repositories for the configured backend.

    The SQL engine is created lazily by SQLAlchemy: no connection is opened
    here, migrations and seeding run later in the application lifespan. The
    in-memory store is seeded immediately when SEED_DATA is on.
    """
    if settings.store_backend == "memory":
        from catalog.migrations import seed_memory_store
        from catalog.repositories.memory import (
            InMemoryCategoryRepository,
            InMemoryProductRepository,
            InMemoryStore,
        )

        shared = InMemoryStore()
        if settings.seed_data:
            seed_memory_store(shared)
        logger.info("Using in-memory store")
        return Store(
            backend="memory",
            categories=InMemoryCategoryRepository(shared),
            products=InMemoryProductRepository(shared),
        )

    from catalog.database import create_engine, create_session_factory
    from catalog.repositories.sql import SqlCategoryRepository, SqlProductRepository

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    logger.info("Using SQL store (%s)", engine.url.render_as_string(hide_password=True))
    return Store(
        backend="sql",
        categories=SqlCategoryRepository(session_factory),
        products=SqlProductRepository(session_factory),
        engine=engine,
        session_factory=session_factory,
    )
