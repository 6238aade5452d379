"""
Todo Service

This service holds the domain rules for todos:
- Validating new todos (non-empty title, deadline strictly in the future)
- Computing incoming-todo windows (today / next day / current week)
- Merging partial updates field by field
- Orchestrating persistence through a TodoRepository

Design Decisions:
- The repository and the clock are constructor arguments, so the service
  holds no global state and tests can pin "now"
- "Not found" is a normal result (None / False), not an exception
- StorageError from the repository is propagated untouched; the service
  neither masks nor retries it
- Partial updates keep an asymmetry on purpose: an empty title or
  description means "no change", while expires_at and progress overwrite
  whenever they are present, even when falsy
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Union

from app.core.exceptions import ValidationError
from app.core.validators import is_valid_progress, is_valid_todo_id
from app.db.models import Todo
from app.db.repository import TodoRepository
from app.services.date_ranges import TodoRange, compute_window, to_local_naive

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DONE_PROGRESS = 1.0


@dataclass(frozen=True)
class NewTodo:
    """Input for creating a todo."""
    title: Optional[str]
    expires_at: Optional[datetime]
    description: Optional[str] = None


@dataclass(frozen=True)
class TodoPatch:
    """
    Input for a partial update. None means "field absent".

    title/description are also skipped when empty; expires_at/progress are
    applied whenever they are not None.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    expires_at: Optional[datetime] = None
    progress: Optional[float] = None


class TodoService:
    """
    Core business logic for todos.

    Separated from the API layer for testability; knows nothing about HTTP.
    """

    def __init__(self, repository: TodoRepository, clock: Clock = datetime.now):
        """
        Initialize the todo service.

        Args:
            repository: Persistence collaborator
            clock: Returns the current local time; datetime.now by default
        """
        self.repository = repository
        self.clock = clock

    def _now(self) -> datetime:
        return to_local_naive(self.clock())

    async def list_all(self) -> List[Todo]:
        """
        Return all todos in storage order.

        An empty list is a normal result.
        """
        return await self.repository.find_all()

    async def get_by_id(self, todo_id: int) -> Optional[Todo]:
        """
        Return the todo with this id, or None if there is none.

        Ids that cannot exist (zero, negative, non-integers) are reported as
        not found rather than rejected.
        """
        if not is_valid_todo_id(todo_id):
            return None
        return await self.repository.find_by_id(todo_id)

    async def add(self, new_todo: NewTodo) -> Todo:
        """
        Validate and persist a new todo.

        Progress always starts at 0 and the id is assigned by storage.

        Args:
            new_todo: Title, deadline and optional description

        Returns:
            The persisted todo

        Raises:
            ValidationError: If the title is empty or the deadline is not in the future
            StorageError: If persisting fails
        """
        if not new_todo.title:
            logger.debug("Rejected new todo: empty title")
            raise ValidationError("Title is required.", field="title")

        if new_todo.expires_at is None:
            raise ValidationError("Expiration date is required.", field="expires_at")

        expires_at = to_local_naive(new_todo.expires_at)
        if expires_at <= self._now():
            logger.debug(f"Rejected new todo: expires_at {expires_at.isoformat()} is not in the future")
            raise ValidationError("Expiration date must be in the future.", field="expires_at")

        todo = Todo(
            title=new_todo.title,
            description=new_todo.description or "",
            expires_at=expires_at,
            progress=0.0,
        )
        created = await self.repository.insert(todo)
        logger.info(f"Created todo {created.id} expiring at {created.expires_at.isoformat()}")
        return created

    async def get_incoming(self, todo_range: Union[TodoRange, str, int]) -> List[Todo]:
        """
        Return todos whose deadline falls inside the window of `todo_range`.

        The range is validated here even if the caller already did so.

        Raises:
            ValidationError: If todo_range is not one of Today, NextDay, CurrentWeek
        """
        selected = TodoRange.parse(todo_range)
        window = compute_window(selected, self._now())
        return await self.repository.query_by_expiry(window.start, window.end)

    async def update(self, todo_id: int, patch: TodoPatch) -> Optional[Todo]:
        """
        Merge the present fields of `patch` into an existing todo.

        Returns:
            The updated todo, or None if no todo has this id

        Raises:
            ValidationError: If progress is present and outside [0.0, 1.0]
            StorageError: If loading or persisting fails
        """
        if patch.progress is not None and not is_valid_progress(patch.progress):
            raise ValidationError("Progress must be between 0 and 1.", field="progress")

        if not is_valid_todo_id(todo_id):
            return None

        todo = await self.repository.find_by_id(todo_id, for_update=True)
        if todo is None:
            return None

        if patch.title:
            todo.title = patch.title
        if patch.description:
            todo.description = patch.description
        if patch.expires_at is not None:
            todo.expires_at = to_local_naive(patch.expires_at)
        if patch.progress is not None:
            todo.progress = float(patch.progress)

        updated = await self.repository.update(todo)
        logger.info(f"Updated todo {updated.id}")
        return updated

    async def delete(self, todo_id: int) -> bool:
        """
        Remove a todo.

        Returns:
            True if it existed and was removed, False otherwise
        """
        if not is_valid_todo_id(todo_id):
            return False

        deleted = await self.repository.delete(todo_id)
        if deleted:
            logger.info(f"Deleted todo {todo_id}")
        return deleted

    async def mark_done(self, todo_id: int) -> Optional[Todo]:
        """Set progress to exactly 1.0, leaving every other field untouched."""
        if not is_valid_todo_id(todo_id):
            return None

        todo = await self.repository.find_by_id(todo_id, for_update=True)
        if todo is None:
            return None

        todo.progress = DONE_PROGRESS
        updated = await self.repository.update(todo)
        logger.info(f"Marked todo {updated.id} as done")
        return updated
