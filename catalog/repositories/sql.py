"""
Catalog API: SQL Repositories
===============================

What:  Async SQLAlchemy implementations of the repository interfaces.
Who:   Selected with STORE_BACKEND=sql (the default).

Session strategy:
    Each operation opens its own session and transaction from the shared
    async_sessionmaker (`factory.begin()` commits on success, rolls back on
    any exception). Operations never share a connection.

Constraint strategy (check-then-act):
    Name uniqueness and category existence are checked with separate SELECTs
    before the write so the client gets a precise error message. Those checks
    are not atomic against concurrent writers; the UNIQUE(name) and foreign
    key constraints are. An IntegrityError raised by the write is translated
    back into NameConflictError or CategoryReferenceError.

Error translation:
    Domain errors pass through untouched. Every other SQLAlchemyError becomes
    DatabaseError with a generic per-operation message; the driver error is
    logged, never returned.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from catalog.exceptions import (
    CatalogError,
    CategoryReferenceError,
    DatabaseError,
    NameConflictError,
    NotFoundError,
)
from catalog.models.category import CategoryRecord
from catalog.models.product import ProductRecord
from catalog.repositories.base import CategoryRepository, ProductRepository
from catalog.schemas.category import Category
from catalog.schemas.product import Product

logger = logging.getLogger(__name__)


def _to_category(record: CategoryRecord) -> Category:
    return Category(
        id=record.id,
        name=record.name,
        description=record.description or "",
    )


def _to_product(record: ProductRecord) -> Product:
    return Product(
        id=record.id,
        name=record.name,
        price=float(record.price),
        stock=record.stock,
        category_id=record.category_id,
        category=_to_category(record.category) if record.category is not None else None,
    )


def _database_error(message: str, exc: SQLAlchemyError, **context) -> DatabaseError:
    logger.error("%s: %s", message, exc, exc_info=True)
    context["error_type"] = type(exc).__name__
    return DatabaseError(message=message, context=context)


class SqlCategoryRepository(CategoryRepository):
    """Categories in the `categories` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    async def _name_taken(
        session: AsyncSession, name: str, exclude_id: Optional[int] = None
    ) -> bool:
        query = select(CategoryRecord.id).where(CategoryRecord.name == name)
        if exclude_id is not None:
            query = query.where(CategoryRecord.id != exclude_id)
        return bool(await session.scalar(select(query.exists())))

    async def list_all(self) -> List[Category]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(CategoryRecord).order_by(CategoryRecord.id)
                )
                return [_to_category(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _database_error("Failed to retrieve categories", e) from e

    async def get(self, category_id: int) -> Category:
        try:
            async with self._session_factory() as session:
                record = await session.get(CategoryRecord, category_id)
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to retrieve category", e, category_id=category_id
            ) from e

        if record is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        return _to_category(record)

    async def create(self, *, name: str, description: str) -> Category:
        try:
            async with self._session_factory.begin() as session:
                if await self._name_taken(session, name):
                    raise NameConflictError(resource="category", name=name)

                record = CategoryRecord(name=name, description=description)
                session.add(record)
                await session.flush()
                category = _to_category(record)
        except IntegrityError as e:
            logger.warning("Category insert hit a constraint: %s", e.orig)
            raise NameConflictError(resource="category", name=name) from e
        except SQLAlchemyError as e:
            raise _database_error("Failed to create category", e, name=name) from e

        logger.info("Category created: id=%d name=%r", category.id, category.name)
        return category

    async def update(self, category_id: int, *, name: str, description: str) -> Category:
        try:
            async with self._session_factory.begin() as session:
                record = await session.get(CategoryRecord, category_id)
                if record is None:
                    raise NotFoundError(resource="category", resource_id=category_id)
                if await self._name_taken(session, name, exclude_id=category_id):
                    raise NameConflictError(resource="category", name=name)

                record.name = name
                record.description = description
                await session.flush()
                category = _to_category(record)
        except IntegrityError as e:
            logger.warning("Category update hit a constraint: %s", e.orig)
            raise NameConflictError(resource="category", name=name) from e
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to update category", e, category_id=category_id
            ) from e

        return category

    async def delete(self, category_id: int) -> None:
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(
                    delete(CategoryRecord).where(CategoryRecord.id == category_id)
                )
                if result.rowcount == 0:
                    raise NotFoundError(resource="category", resource_id=category_id)
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to delete category", e, category_id=category_id
            ) from e

        logger.info("Category deleted: id=%d", category_id)


class SqlProductRepository(ProductRepository):
    """
    Products in the `products` table.

    Reads LEFT JOIN categories (joinedload on the many-to-one) to build the
    embedded snapshot.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _select():
        return (
            select(ProductRecord)
            .options(joinedload(ProductRecord.category))
            .order_by(ProductRecord.id)
        )

    async def _fetch_one(self, session: AsyncSession, product_id: int) -> Optional[Product]:
        # populate_existing refreshes rows already in the identity map,
        # including the category just changed by update()
        result = await session.execute(
            self._select()
            .where(ProductRecord.id == product_id)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        return _to_product(record) if record is not None else None

    @staticmethod
    async def _name_taken(
        session: AsyncSession, name: str, exclude_id: Optional[int] = None
    ) -> bool:
        query = select(ProductRecord.id).where(ProductRecord.name == name)
        if exclude_id is not None:
            query = query.where(ProductRecord.id != exclude_id)
        return bool(await session.scalar(select(query.exists())))

    @staticmethod
    async def _category_exists(session: AsyncSession, category_id: int) -> bool:
        query = select(CategoryRecord.id).where(CategoryRecord.id == category_id)
        return bool(await session.scalar(select(query.exists())))

    @staticmethod
    def _classify_integrity_error(
        exc: IntegrityError, name: str, category_id: int
    ) -> CatalogError:
        """
        Decide which constraint a failed write tripped.

        Why: the pre-checks ran in the same transaction, so a violation means
        another writer got in between. The driver message names the
        constraint kind: "FOREIGN KEY constraint failed" (SQLite) or
        "violates foreign key constraint" (PostgreSQL). Anything else on
        this table is the unique name.
        """
        if "foreign key" in str(exc.orig).lower():
            return CategoryReferenceError(category_id=category_id)
        return NameConflictError(resource="product", name=name)

    async def list_all(self) -> List[Product]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(self._select())
                return [_to_product(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _database_error("Failed to retrieve products", e) from e

    async def get(self, product_id: int) -> Product:
        try:
            async with self._session_factory() as session:
                product = await self._fetch_one(session, product_id)
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to retrieve product", e, product_id=product_id
            ) from e

        if product is None:
            raise NotFoundError(resource="product", resource_id=product_id)
        return product

    async def list_by_category(self, category_id: int) -> List[Product]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    self._select().where(ProductRecord.category_id == category_id)
                )
                return [_to_product(record) for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to retrieve products", e, category_id=category_id
            ) from e

    async def category_exists(self, category_id: int) -> bool:
        try:
            async with self._session_factory() as session:
                return await self._category_exists(session, category_id)
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to check category", e, category_id=category_id
            ) from e

    async def create(
        self, *, name: str, price: float, stock: int, category_id: int = 0
    ) -> Product:
        try:
            async with self._session_factory.begin() as session:
                if await self._name_taken(session, name):
                    raise NameConflictError(resource="product", name=name)
                if category_id and not await self._category_exists(session, category_id):
                    raise CategoryReferenceError(category_id=category_id)

                record = ProductRecord(
                    name=name,
                    price=price,
                    stock=stock,
                    category_id=category_id or None,
                )
                session.add(record)
                await session.flush()
                product = await self._fetch_one(session, record.id)
        except IntegrityError as e:
            logger.warning("Product insert hit a constraint: %s", e.orig)
            error = self._classify_integrity_error(e, name, category_id)
            raise error from e
        except SQLAlchemyError as e:
            raise _database_error("Failed to create product", e, name=name) from e

        logger.info("Product created: id=%d name=%r", product.id, product.name)
        return product

    async def update(
        self,
        product_id: int,
        *,
        name: str,
        price: float,
        stock: int,
        category_id: int = 0,
    ) -> Product:
        try:
            async with self._session_factory.begin() as session:
                if category_id and not await self._category_exists(session, category_id):
                    raise CategoryReferenceError(category_id=category_id)

                record = await session.get(ProductRecord, product_id)
                if record is None:
                    raise NotFoundError(resource="product", resource_id=product_id)
                if await self._name_taken(session, name, exclude_id=product_id):
                    raise NameConflictError(resource="product", name=name)

                record.name = name
                record.price = price
                record.stock = stock
                record.category_id = category_id or None
                await session.flush()
                product = await self._fetch_one(session, product_id)
        except IntegrityError as e:
            logger.warning("Product update hit a constraint: %s", e.orig)
            error = self._classify_integrity_error(e, name, category_id)
            raise error from e
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to update product", e, product_id=product_id
            ) from e

        return product

    async def delete(self, product_id: int) -> None:
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(
                    delete(ProductRecord).where(ProductRecord.id == product_id)
                )
                if result.rowcount == 0:
                    raise NotFoundError(resource="product", resource_id=product_id)
        except SQLAlchemyError as e:
            raise _database_error(
                "Failed to delete product", e, product_id=product_id
            ) from e
