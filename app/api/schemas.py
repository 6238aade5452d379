"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Define input shape (domain rules stay in the service)
- Response models: Define output structure
- Separation: Can be imported by other modules (services, tests, etc.)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.db.models import TITLE_MAX_LENGTH


class TodoCreateRequest(BaseModel):
    """Request model for creating a todo."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy Groceries",
                "description": "Purchase milk, eggs, and bread from the store.",
                "expires_at": "2030-02-01T18:00:00",
            }
        }
    )

    title: str = Field(..., max_length=TITLE_MAX_LENGTH, description="Short title; must not be empty")
    description: Optional[str] = Field(default=None, description="Optional free text")
    expires_at: datetime = Field(..., description="Deadline; must be in the future")


class TodoUpdateRequest(BaseModel):
    """
    Request model for a partial update.

    Omitted or null fields are left unchanged. Empty title/description
    strings are also treated as "no change".
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy Groceries and supplies",
                "progress": 0.5,
            }
        }
    )

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)
    progress: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Completion in [0, 1]")


class TodoResponse(BaseModel):
    """Response model for a single todo."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier of the todo")
    title: str
    description: str
    expires_at: datetime
    progress: float = Field(..., description="Completion in [0, 1]; 1 means done")


class IncomingTodosResponse(BaseModel):
    """Response model for the incoming-todos endpoint."""
    message: str
    valid_ranges: List[str]
    selected_range: str
    todos: List[TodoResponse]
