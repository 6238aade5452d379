"""
Todo Repository

This module defines the persistence contract the service layer talks to,
and its SQLAlchemy implementation.

Design Decisions:
- The service depends on the abstract TodoRepository only; the concrete
  class is supplied through the service constructor
- Every write commits exactly once; on failure the transaction is rolled
  back so no partial mutation is visible
- Driver/ORM failures never leak as SQLAlchemy exceptions: they are
  wrapped in StorageError with the original attached
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.db.interface import DatabaseAdapter
from app.db.models import Todo

logger = logging.getLogger(__name__)


class TodoRepository(ABC):
    """
    Abstract repository contract for todo storage backends.

    All methods may suspend on I/O and may raise StorageError.
    """

    @abstractmethod
    async def find_all(self) -> List[Todo]:
        """Return every todo in storage order (ascending id)."""

    @abstractmethod
    async def find_by_id(self, todo_id: int, for_update: bool = False) -> Optional[Todo]:
        """
        Return the todo with this id, or None.

        With for_update=True the row is locked until the next write commits.
        """

    @abstractmethod
    async def insert(self, todo: Todo) -> Todo:
        """Persist a new todo and return it with its id assigned."""

    @abstractmethod
    async def update(self, todo: Todo) -> Todo:
        """Persist changes to an existing todo and commit."""

    @abstractmethod
    async def delete(self, todo_id: int) -> bool:
        """Remove a todo. Return True if a row was removed, False if none matched."""

    @abstractmethod
    async def query_by_expiry(self, start: datetime, end: datetime) -> List[Todo]:
        """Return todos with start <= expires_at <= end, soonest first."""


class SQLTodoRepository(TodoRepository):
    """
    TodoRepository backed by an SQLAlchemy AsyncSession.

    One instance wraps one session, i.e. one request.
    """

    def __init__(self, session: AsyncSession, adapter: DatabaseAdapter):
        """
        Args:
            session: Async database session for database operations
            adapter: Database adapter supplying dialect-specific behaviour
        """
        self.session = session
        self.adapter = adapter

    async def find_all(self) -> List[Todo]:
        statement = select(Todo).order_by(Todo.id)
        try:
            result = await self.session.execute(statement)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Failed to list todos", original_error=e) from e

    async def find_by_id(self, todo_id: int, for_update: bool = False) -> Optional[Todo]:
        statement = select(Todo).where(Todo.id == todo_id)
        if for_update:
            statement = self.adapter.lock_for_update(statement)
        try:
            result = await self.session.execute(statement)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self._rollback()
            raise StorageError(f"Failed to load todo {todo_id}", original_error=e) from e

    async def insert(self, todo: Todo) -> Todo:
        try:
            self.session.add(todo)
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(todo)
            return todo
        except SQLAlchemyError as e:
            await self._rollback()
            raise StorageError("Failed to insert todo", original_error=e) from e

    async def update(self, todo: Todo) -> Todo:
        # Read before the try: rollback expires the instance
        todo_id = todo.id
        try:
            self.session.add(todo)
            await self.session.flush()
            await self.session.commit()
            await self.session.refresh(todo)
            return todo
        except SQLAlchemyError as e:
            await self._rollback()
            raise StorageError(f"Failed to update todo {todo_id}", original_error=e) from e

    async def delete(self, todo_id: int) -> bool:
        statement = delete(Todo).where(Todo.id == todo_id)
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self._rollback()
            raise StorageError(f"Failed to delete todo {todo_id}", original_error=e) from e

    async def query_by_expiry(self, start: datetime, end: datetime) -> List[Todo]:
        statement = (
            select(Todo)
            .where(Todo.expires_at >= start, Todo.expires_at <= end)
            .order_by(Todo.expires_at, Todo.id)
        )
        try:
            result = await self.session.execute(statement)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Failed to query todos by expiry", original_error=e) from e

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after failed todo operation also failed", exc_info=True)
