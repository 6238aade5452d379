"""
Persistence layer for todos.

- models: the Todo table
- repository: TodoRepository contract and its SQL implementation
- interface / sqlite_adapter / postgres_adapter: per-backend engine settings,
  chosen from the scheme of DATABASE_URL
- session: the process-wide engine and the get_session() dependency

A new backend needs a DatabaseAdapter subclass and a branch for its URL
scheme in get_database_adapter().
"""

from app.db.interface import DatabaseAdapter, get_database_adapter
from app.db.session import async_session_maker, engine, get_session

__all__ = [
    "DatabaseAdapter",
    "async_session_maker",
    "engine",
    "get_database_adapter",
    "get_session",
]
