"""
PostgreSQL Client
=================

Async PostgreSQL access for VendorShield using SQLAlchemy 2.0 with asyncpg.

One engine per process, created lazily from ``settings.postgres`` and
disposed on shutdown. Sessions never expire loaded objects on commit, so
repositories can convert rows to models after committing.

Version: 0.1.0
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from shared.config import settings
from shared.logging import get_logger


logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every VendorShield table."""


class PostgresClient:
    """
    Process-wide engine and session factory.

    Usage:
        async with PostgresClient.get_session_factory()() as session:
            ...
    """

    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def get_engine(cls) -> AsyncEngine:
        """Engine for ``settings.postgres``, created on first use."""
        if cls._engine is None:
            pg = settings.postgres
            cls._engine = create_async_engine(
                pg.async_url,
                echo=pg.echo_sql and not settings.is_testing,
                pool_size=pg.pool_size,
                max_overflow=pg.max_overflow,
                pool_pre_ping=True,
                pool_recycle=pg.pool_recycle_seconds,
            )
            logger.info(
                "postgres_engine_created",
                host=pg.host,
                database=pg.db,
                pool_size=pg.pool_size,
            )
        return cls._engine

    @classmethod
    def get_session_factory(cls) -> async_sessionmaker[AsyncSession]:
        if cls._session_factory is None:
            cls._session_factory = async_sessionmaker(
                cls.get_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return cls._session_factory

    @classmethod
    async def create_all(cls) -> None:
        """Create every table registered on ``Base``. Existing tables are kept."""
        async with cls.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("postgres_schema_created", tables=sorted(Base.metadata.tables))

    @classmethod
    async def close(cls) -> None:
        """Dispose of the engine and its pooled connections."""
        if cls._engine is None:
            return
        await cls._engine.dispose()
        cls._engine = None
        cls._session_factory = None
        logger.info("postgres_engine_closed")

    @classmethod
    async def health_check(cls) -> dict[str, Any]:
        """
        Round-trip a trivial query.

        Returns:
            dict with status, and latency or the error
        """
        start = time.perf_counter()
        try:
            async with cls.get_session_factory()() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("postgres_health_check_failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy",
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "host": settings.postgres.host,
            "database": settings.postgres.db,
        }


async def get_postgres_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a session per request.

    Pending changes are committed when the request succeeds and rolled
    back when it raises.

    Usage:
        async def get_repository(db: AsyncSession = Depends(get_postgres_session)):
            return PostgresAssessmentRepository(db)
    """
    async with postgres_session() as session:
        yield session


@asynccontextmanager
async def postgres_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session context for scripts and background work.

    Usage:
        async with postgres_session() as session:
            repository = PostgresAssessmentRepository(session)
    """
    async with PostgresClient.get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
