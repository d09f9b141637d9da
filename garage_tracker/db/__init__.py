"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Database: engine + session factory owned by one application instance
- get_session: FastAPI dependency yielding a per-request session

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Update get_database_adapter() in sqlite_adapter.py to return the new adapter
"""

from garage_tracker.db.interface import DatabaseAdapter
from garage_tracker.db.session import Database, get_session

__all__ = [
    "DatabaseAdapter",
    "Database",
    "get_session",
]
