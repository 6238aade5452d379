"""
PostgreSQL Database Adapter

This module implements the DatabaseAdapter interface for PostgreSQL
(asyncpg driver). Selected when DATABASE_URL starts with
postgresql+asyncpg://.

Key characteristics:
- Server-based, many concurrent writers
- Real row-level locks (SELECT ... FOR UPDATE)
- Benefits from connection pooling
"""

from typing import Any, Optional
from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool

from app.core.setting import settings
from app.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> Optional[type[Pool]]:
        # SQLAlchemy picks AsyncAdaptedQueuePool for async engines
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Pool sizing plus pre-ping so connections dropped by the server are
        replaced instead of failing the first query of a request.
        """
        return {
            "echo": settings.SQL_ECHO,
            "pool_size": 5,
            "max_overflow": 10,
            "pool_pre_ping": True,
        }

    def lock_for_update(self, statement: Select) -> Select:
        """Lock the selected rows until the surrounding transaction ends."""
        return statement.with_for_update(nowait=False)

    def get_dialect_name(self) -> str:
        return "postgresql"
