"""
Database Models for the Todo Service

This module defines the SQLModel schema for the single entity of the service:
- Todo: a time-bound task with a deadline and a fractional progress value

Design Decisions:
- id is assigned by the database on insert (AUTOINCREMENT on SQLite so ids
  are never reused after a delete)
- expires_at is indexed because range queries filter on it
- Timestamps are stored naive, in local wall-clock time, so that "today"
  windows line up with calendar days
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Float, String, Text
from sqlmodel import Field, SQLModel


TITLE_MAX_LENGTH = 200


class Todo(SQLModel, table=True):
    """
    Todo table.

    Fields:
    - id: Auto-incrementing primary key, immutable after creation
    - title: Non-empty short title
    - description: Free text, empty string when not given
    - expires_at: Deadline of the todo
    - progress: Completion in [0.0, 1.0]; 1.0 means done
    """
    __tablename__ = "todos"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(
        sa_column=Column(String(TITLE_MAX_LENGTH), nullable=False),
        max_length=TITLE_MAX_LENGTH
    )
    description: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    expires_at: datetime = Field(
        sa_column=Column(DateTime(timezone=False), nullable=False, index=True)
    )
    progress: float = Field(default=0.0, sa_column=Column(Float, nullable=False, default=0.0))
