"""
Custom Exceptions

This module defines the error taxonomy of the todo service.

- ValidationError: bad caller input (empty title, past expiry, unknown range).
  Reported back to the caller, never retried.
- StorageError: the persistence layer failed (connectivity, constraint
  violation). Raised by the repository and propagated unchanged by the
  service layer.

"Not found" is deliberately not an exception: lookups return None and
deletes return False.
"""

from typing import Optional


class TodoServiceException(Exception):
    """Base exception for the todo service."""
    pass


class ValidationError(TodoServiceException):
    """Raised when caller input breaks a domain rule."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class StorageError(TodoServiceException):
    """Raised when a repository operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")
