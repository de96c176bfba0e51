"""Async SQLAlchemy engine, request sessions and schema checks."""

import time
from collections.abc import AsyncGenerator

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from licensedb.core.config import settings
from licensedb.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


engine = create_async_engine(
    settings.database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Services commit or roll back themselves; anything left open when the
    request ends is rolled back on close.
    """
    async with async_session_maker() as session:
        yield session


def _registered_tables() -> set[str]:
    # importing the models fills Base.metadata
    from licensedb.database import models  # noqa: F401

    return set(Base.metadata.tables)


class DatabaseClient:
    """Connection checks and schema management for the obligation store."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._connected = False

    async def connect(self) -> None:
        """Open a connection once to make sure the database is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            self._connected = False
            LOGGER.error("Database connection failed", exc_info=True)
            raise

        self._connected = True
        LOGGER.info("Database connection successful")

    async def disconnect(self) -> None:
        await self.engine.dispose()
        self._connected = False
        LOGGER.info("Database connection closed")

    async def missing_tables(self) -> list[str]:
        """Names of mapped tables that do not exist in the database."""
        expected = _registered_tables()
        async with self.engine.connect() as conn:
            existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        return sorted(expected - existing)

    async def create_tables(self) -> None:
        """Create the obligation, license, user and audit tables that are missing."""
        _registered_tables()
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            LOGGER.error("Failed to create database tables", exc_info=True, extra={"error": str(e)})
            raise

        LOGGER.info("Database tables created/verified successfully")

    async def health_check(self) -> dict:
        """Probe the database and report round trip latency and missing tables."""
        started = time.perf_counter()
        try:
            async with self.engine.connect() as conn:
                await conn.scalar(text("SELECT 1"))
            latency_ms = round((time.perf_counter() - started) * 1000, 2)
            missing = await self.missing_tables()
        except Exception as e:
            self._connected = False
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "connected": False, "error": str(e)}

        self._connected = True
        return {
            "status": "unhealthy" if missing else "healthy",
            "connected": True,
            "latency_ms": latency_ms,
            "missing_tables": missing,
        }

    @property
    def is_connected(self) -> bool:
        return self._connected


db_client = DatabaseClient(engine)


async def init_database(auto_migrate: bool = True) -> None:
    """Connect and make sure the schema is in place.

    Args:
        auto_migrate: Create missing tables instead of only reporting them
    """
    LOGGER.info("Initializing database connection...")
    await db_client.connect()

    if auto_migrate:
        await db_client.create_tables()
        return

    missing = await db_client.missing_tables()
    if missing:
        LOGGER.warning(f"Tables missing, run 'alembic upgrade head': {', '.join(missing)}")


async def close_database() -> None:
    LOGGER.info("Closing database connection...")
    await db_client.disconnect()
