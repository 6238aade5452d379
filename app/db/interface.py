"""
Database Adapter Interface

Everything that depends on which database sits behind DATABASE_URL lives
behind DatabaseAdapter: engine and pool options, connection arguments and
how a SELECT takes row locks. The repository and the session module only
talk to this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Per-backend configuration for the todo store.

    Implementations: SQLiteAdapter (default, tests) and PostgreSQLAdapter.
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build the process-wide async engine.

        Args:
            database_url: Async SQLAlchemy URL for this backend
            **kwargs: Overrides for the adapter's engine options

        Returns:
            AsyncEngine ready for async_sessionmaker
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool class to use, or None for SQLAlchemy's async default."""
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Driver-level arguments passed as connect_args."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Engine options such as echo and pool sizing."""
        pass

    @abstractmethod
    def lock_for_update(self, statement: Select) -> Select:
        """
        Turn a row-reading statement into one that locks the rows it reads.

        Read-modify-write operations (update, mark done) read through this
        so that backends with row locks hold the row until the write commits.

        Args:
            statement: A SELECT statement

        Returns:
            The statement with the dialect's row-locking applied
        """
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Args:
        database_url: SQLAlchemy URL, e.g. sqlite+aiosqlite:///./todos.db

    Returns:
        DatabaseAdapter instance matching the URL scheme

    Raises:
        ValueError: If no adapter handles the URL scheme
    """
    scheme = database_url.split("://", 1)[0].lower()

    if scheme.startswith("sqlite"):
        from app.db.sqlite_adapter import SQLiteAdapter
        return SQLiteAdapter()
    if scheme.startswith("postgresql"):
        from app.db.postgres_adapter import PostgreSQLAdapter
        return PostgreSQLAdapter()

    raise ValueError(f"Unsupported database URL scheme: '{scheme}'")
