"""
Catalog API: Schema Bootstrap & Seed Data
===========================================

What:  Idempotent schema creation plus the fixed starter rows.
When:  At startup (lifespan) for the SQL store; at construction for the
       in-memory store.

    run_migrations(engine)      CREATE TABLE IF NOT EXISTS categories, products
    seed_categories(factory)    insert SEED_CATEGORIES when the table is empty
    seed_products(factory)      insert SEED_PRODUCTS when the table is empty
    seed_memory_store(store)    same rows into an empty InMemoryStore

Seeding never touches a table that already has rows, so restarts and
multiple workers are safe to run it again.
"""

import logging
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from catalog.database import Base
from catalog.models.category import CategoryRecord
from catalog.models.product import ProductRecord
from catalog.repositories.memory import InMemoryStore, StoredProduct
from catalog.schemas.category import Category

logger = logging.getLogger(__name__)

# (name, description)
SEED_CATEGORIES: List[Tuple[str, str]] = [
    ("Electronics", "Electronic devices and gadgets"),
    ("Clothing", "Apparel and fashion items"),
    ("Books", "Books and reading materials"),
    ("Food & Beverages", "Food products and drinks"),
    ("Sports", "Sports equipment and accessories"),
]

# (name, price, stock, category_id); everything is filed under Electronics
SEED_PRODUCTS: List[Tuple[str, float, int, int]] = [
    ("iPhone 15 Pro", 999.99, 50, 1),
    ("MacBook Pro M3", 2499.99, 25, 1),
    ("AirPods Pro", 249.99, 100, 1),
    ("iPad Air", 599.99, 40, 1),
    ("Apple Watch Series 9", 399.99, 60, 1),
]


async def run_migrations(engine: AsyncEngine) -> None:
    """Create any missing tables. Existing tables are left alone."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Database migrations completed successfully")


async def _is_empty(session: AsyncSession, model) -> bool:
    count = await session.scalar(select(func.count()).select_from(model))
    return not count


async def seed_categories(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory.begin() as session:
        if not await _is_empty(session, CategoryRecord):
            logger.info("Categories table already has data, skipping seed")
            return
        session.add_all(
            CategoryRecord(name=name, description=description)
            for name, description in SEED_CATEGORIES
        )
    logger.info("Categories seeding completed successfully")


async def seed_products(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory.begin() as session:
        if not await _is_empty(session, ProductRecord):
            logger.info("Products table already has data, skipping seed")
            return

        # the fixed category ids only hold when categories were seeded too
        existing = set((await session.scalars(select(CategoryRecord.id))).all())
        session.add_all(
            ProductRecord(
                name=name,
                price=price,
                stock=stock,
                category_id=category_id if category_id in existing else None,
            )
            for name, price, stock, category_id in SEED_PRODUCTS
        )
    logger.info("Products seeding completed successfully")


def seed_memory_store(store: InMemoryStore) -> None:
    """Load the starter rows into a freshly built, still unshared store."""
    if not store.categories:
        for name, description in SEED_CATEGORIES:
            category_id = store.allocate_category_id()
            store.categories[category_id] = Category(
                id=category_id, name=name, description=description
            )
    if not store.products:
        for name, price, stock, category_id in SEED_PRODUCTS:
            product_id = store.allocate_product_id()
            store.products[product_id] = StoredProduct(
                id=product_id,
                name=name,
                price=price,
                stock=stock,
                category_id=category_id if category_id in store.categories else None,
            )
    logger.info(
        "In-memory store seeded: %d categories, %d products",
        len(store.categories),
        len(store.products),
    )
