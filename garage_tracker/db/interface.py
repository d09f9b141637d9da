"""
Database Abstraction Interface

A DatabaseAdapter knows how one backend wants its async engine built:
which pool to use, which driver connect args to pass and what to do with
each fresh connection. Database (session.py) only ever talks to this
interface, so the record and credential stores stay backend agnostic.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Subclasses describe the engine; create_engine() assembles it and then
    hands it to configure_engine() for backend-specific event hooks.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build the async engine for database_url.

        Args:
            database_url: SQLAlchemy async connection string
            **kwargs: Extra engine options, overriding the adapter defaults

        Returns:
            Configured AsyncEngine instance
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs["poolclass"] = pool_class

        connect_args = self.get_connect_args()
        if connect_args:
            engine_kwargs["connect_args"] = connect_args

        engine = create_async_engine(database_url, **engine_kwargs)
        self.configure_engine(engine)
        return engine

    def configure_engine(self, engine: AsyncEngine) -> None:
        """Attach backend-specific listeners to a new engine. No-op by default."""

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool class for this backend, or None for SQLAlchemy's default."""

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Driver-level connect arguments."""

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Default keyword arguments for create_async_engine."""

    @abstractmethod
    def get_dialect_name(self) -> str:
        """SQLAlchemy dialect name, e.g. 'sqlite' or 'postgresql'."""
