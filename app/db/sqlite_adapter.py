"""
SQLite Database Adapter

The default backend: DATABASE_URL falls back to a todos.db file next to
the working directory, and the test suite runs against an in-memory
database with the same dialect.

Things that differ from PostgreSQL:
- One writer at a time; the database file itself is the lock
- No row-level locks, so SELECT ... FOR UPDATE is compiled away
- Connections are cheap to open, so none are kept around
"""

from typing import Any
from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.setting import settings
from app.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """Engine settings and locking behaviour for sqlite+aiosqlite URLs."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build the async engine for a SQLite file or :memory: database.

        Args:
            database_url: e.g. sqlite+aiosqlite:///./todos.db
            **kwargs: Overrides for the defaults from get_engine_kwargs()

        Returns:
            AsyncEngine opening one aiosqlite connection per session
        """
        options = {**self.get_engine_kwargs(), **kwargs}

        return create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **options
        )

    def get_pool_class(self) -> type[NullPool]:
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        # aiosqlite hands the connection to its own worker thread
        return {"check_same_thread": False}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {"echo": settings.SQL_ECHO}

    def lock_for_update(self, statement: Select) -> Select:
        """
        Mark the statement FOR UPDATE; the SQLite compiler omits the clause.

        The driver does not open a transaction for a plain SELECT, so two
        concurrent updates are not serialized. The ORM writes only the
        columns a request changed, so a conflict on the same field is
        settled by the last write.
        """
        return statement.with_for_update(nowait=False)

    def get_dialect_name(self) -> str:
        return "sqlite"
