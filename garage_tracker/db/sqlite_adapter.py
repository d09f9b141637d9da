"""
Database Adapters

Concrete DatabaseAdapter implementations: SQLite (the default) and a
generic adapter for server databases such as PostgreSQL.

SQLite specifics handled here:
- File-based (single .db file), no server required
- Single writer at a time (file locking)
- Foreign keys are off by default and must be enabled per connection
- lower() is replaced per connection by a Unicode-aware Python function
"""

from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import NullPool, Pool

from garage_tracker.db.interface import DatabaseAdapter


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

    # Built-in lower() only folds ASCII; search compares against Python str.lower()
    dbapi_connection.create_function("lower", 1, _unicode_lower)


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    Uses NullPool: every session opens its own connection to the file,
    which keeps the adapter safe to use from several event loops (the
    test client runs the app in its own loop).
    """

    def configure_engine(self, engine: AsyncEngine) -> None:
        # Foreign key enforcement and Unicode lower() are per-connection settings
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"


class ServerDatabaseAdapter(DatabaseAdapter):
    """
    Adapter for client/server databases (PostgreSQL via asyncpg).

    Relies on SQLAlchemy's default QueuePool, shared by all concurrent
    requests of the process.
    """

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Pick the adapter for a connection string.

    Returns:
        SQLiteAdapter for sqlite URLs, ServerDatabaseAdapter otherwise
    """
    if database_url.startswith("sqlite"):
        return SQLiteAdapter()
    return ServerDatabaseAdapter()
