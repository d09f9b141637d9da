"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: Easy to switch between SQLite, PostgreSQL, etc.
- One Database object per application, created by create_app() from the
  injected settings and kept on app.state (no module-level engine)
- Async session management: commit on success, rollback on exception
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from garage_tracker.db import models  # noqa: F401  (registers tables on SQLModel.metadata)
from garage_tracker.db.sqlite_adapter import get_database_adapter

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for one application instance.

    The engine (and its connection pool) is process-wide and safe for
    concurrent use; each request gets its own session.
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.adapter = get_database_adapter(database_url)
        self.engine = self.adapter.create_engine(database_url)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=SQLModelAsyncSession,
            expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
            autocommit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create any missing tables (idempotent)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f"Database schema ready ({self.adapter.get_dialect_name()})")

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the application's Database
    - Yields it to the endpoint
    - Automatically commits on success
    - Rolls back on exception

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
