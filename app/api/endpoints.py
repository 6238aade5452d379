"""
FastAPI Endpoints for the Todo Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models, id format)
- Rate limiting
- Mapping service results to HTTP status codes
- Delegating to the service layer

All business logic is in TodoService.

Status mapping:
- ValidationError -> 400
- missing todo -> 404
- StorageError -> 500 (handled once, in app.main)
"""

from datetime import datetime
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import (
    IncomingTodosResponse,
    TodoCreateRequest,
    TodoResponse,
    TodoUpdateRequest,
)
from app.core.exceptions import ValidationError
from app.core.rate_limit import limiter, RATE_LIMITS
from app.core.validators import is_valid_todo_id
from app.db.repository import SQLTodoRepository
from app.db.session import db_adapter, get_session
from app.services.date_ranges import TodoRange
from app.services.todo_service import NewTodo, TodoPatch, TodoService


router = APIRouter(prefix="/api/todos")

INVALID_ID_DETAIL = "Invalid ID. ID must be greater than 0."


def get_clock() -> Callable[[], datetime]:
    """Dependency returning the clock the service reads "now" from."""
    return datetime.now


def get_todo_service(
    session: AsyncSession = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TodoService:
    """Build a TodoService bound to the request's session."""
    return TodoService(SQLTodoRepository(session, db_adapter), clock=clock)


def ensure_valid_id(todo_id: int) -> None:
    if not is_valid_todo_id(todo_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_ID_DETAIL)


def todo_not_found(todo_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Todo with ID {todo_id} not found."
    )


@router.get(
    "",
    response_model=List[TodoResponse],
    summary="List todos",
    description="Returns every todo; an empty list when there are none"
)
@limiter.limit(RATE_LIMITS["read"])
async def list_todos(
    request: Request,  # Required for rate limiting
    service: TodoService = Depends(get_todo_service)
) -> List[TodoResponse]:
    todos = await service.list_all()
    return [TodoResponse.model_validate(todo) for todo in todos]


@router.get(
    "/incoming/{todo_range}",
    response_model=IncomingTodosResponse,
    summary="List incoming todos",
    description="Returns todos expiring today, tomorrow (NextDay) or before the end of Saturday (CurrentWeek)"
)
@limiter.limit(RATE_LIMITS["read"])
async def get_incoming_todos(
    todo_range: str,
    request: Request,
    service: TodoService = Depends(get_todo_service)
) -> IncomingTodosResponse:
    """
    Get todos whose deadline falls in the requested window.

    Raises:
        HTTPException 400: If the range is not one of the valid values
    """
    try:
        selected = TodoRange.parse(todo_range)
        todos = await service.get_incoming(selected)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid range. Valid values are: {', '.join(TodoRange.names())}"
        )

    message = (
        "Here are the incoming todos based on the specified range."
        if todos else "No incoming todos found for the specified range."
    )
    return IncomingTodosResponse(
        message=message,
        valid_ranges=TodoRange.names(),
        selected_range=selected.value,
        todos=[TodoResponse.model_validate(todo) for todo in todos],
    )


@router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get a todo"
)
@limiter.limit(RATE_LIMITS["read"])
async def get_todo(
    todo_id: int,
    request: Request,
    service: TodoService = Depends(get_todo_service)
) -> TodoResponse:
    """
    Raises:
        HTTPException 400: If the id is not positive
        HTTPException 404: If no todo has this id
    """
    ensure_valid_id(todo_id)

    todo = await service.get_by_id(todo_id)
    if todo is None:
        raise todo_not_found(todo_id)
    return TodoResponse.model_validate(todo)


@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a todo",
    description="Creates a todo with progress 0; the deadline must be in the future"
)
@limiter.limit(RATE_LIMITS["write"])
async def create_todo(
    request: Request,
    body: TodoCreateRequest,
    service: TodoService = Depends(get_todo_service)
) -> TodoResponse:
    """
    Raises:
        HTTPException 400: If the title is empty or the deadline has passed
    """
    try:
        todo = await service.add(
            NewTodo(title=body.title, description=body.description, expires_at=body.expires_at)
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return TodoResponse.model_validate(todo)


@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update a todo",
    description="Partially updates a todo; omitted fields and empty title/description are left unchanged"
)
@limiter.limit(RATE_LIMITS["write"])
async def update_todo(
    todo_id: int,
    request: Request,
    body: TodoUpdateRequest,
    service: TodoService = Depends(get_todo_service)
) -> TodoResponse:
    ensure_valid_id(todo_id)

    patch = TodoPatch(
        title=body.title,
        description=body.description,
        expires_at=body.expires_at,
        progress=body.progress,
    )
    try:
        todo = await service.update(todo_id, patch)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if todo is None:
        raise todo_not_found(todo_id)
    return TodoResponse.model_validate(todo)


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a todo"
)
@limiter.limit(RATE_LIMITS["write"])
async def delete_todo(
    todo_id: int,
    request: Request,
    service: TodoService = Depends(get_todo_service)
) -> Response:
    ensure_valid_id(todo_id)

    if not await service.delete(todo_id):
        raise todo_not_found(todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{todo_id}/done",
    response_model=TodoResponse,
    summary="Mark a todo as done",
    description="Sets progress to 1 and leaves every other field unchanged"
)
@limiter.limit(RATE_LIMITS["write"])
async def mark_todo_done(
    todo_id: int,
    request: Request,
    service: TodoService = Depends(get_todo_service)
) -> TodoResponse:
    ensure_valid_id(todo_id)

    todo = await service.mark_done(todo_id)
    if todo is None:
        raise todo_not_found(todo_id)
    return TodoResponse.model_validate(todo)
