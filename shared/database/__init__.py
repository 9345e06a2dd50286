"""
Database Module
===============

Async PostgreSQL client (asyncpg + SQLAlchemy) for VendorShield.

Usage:
    from shared.database import get_postgres_session

    # In FastAPI
    @app.get("/example")
    async def example(
        db: AsyncSession = Depends(get_postgres_session),
    ):
        result = await db.execute(select(VendorModel))
        ...
"""

from shared.database.postgres import (
    Base,
    PostgresClient,
    get_postgres_session,
    postgres_session,
)


__all__ = [
    "get_postgres_session",
    "postgres_session",
    "PostgresClient",
    "Base",
]
