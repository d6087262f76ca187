"""
Catalog API: Database Engine & Session Management
===================================================

What:  Async SQLAlchemy engine factory, session factory and declarative base.
How:   `create_engine(settings)` builds a pooled async engine from the
       resolved connection URL; `create_session_factory(engine)` returns the
       async_sessionmaker the SQL repositories use. Every repository operation
       opens its own session, so each request works on its own connection.
Who:   Called once by create_app(); the engine is disposed during shutdown.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from Settings.
    pool_recycle=3600 recycles connections every hour.
    SQLite (used by the test suite) skips the pool arguments and turns on
    foreign key enforcement for every new connection, which SQLite leaves off
    by default. Without it ON DELETE SET NULL would not fire.
"""

from sqlalchemy import BigInteger, Integer, event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from catalog.config import Settings


# BIGINT keys (BIGSERIAL on PostgreSQL). SQLite only autoincrements a column
# declared exactly INTEGER, which is 64-bit there anyway.
IdType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All table classes share this metadata; catalog.migrations creates the
    schema from it.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    Args:
        settings: Application settings (URL, pool sizing, log level)

    Returns:
        AsyncEngine. No connection is opened until first use.
    """
    url = settings.resolved_database_url
    echo = settings.log_level == "DEBUG"

    if settings.is_sqlite:
        engine = create_async_engine(url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded attributes readable after commit
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def ping(engine: AsyncEngine) -> None:
    """Execute SELECT 1; raises whatever the driver raises on failure."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close every pooled connection. Called during application shutdown."""
    await engine.dispose()
