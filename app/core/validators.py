"""
Input Validators

Small predicates shared by the API layer and the service layer.
They return booleans; raising is left to the caller so each layer can
report the problem in its own terms (HTTP 400 vs ValidationError).
"""

import math
from typing import Any, Optional


MIN_PROGRESS = 0.0
MAX_PROGRESS = 1.0


def is_valid_todo_id(todo_id: Any) -> bool:
    """
    Check that a todo id is a positive integer.

    Booleans are rejected even though bool is a subclass of int.

    Args:
        todo_id: The id to check

    Returns:
        True if the id can identify a stored todo, False otherwise
    """
    if isinstance(todo_id, bool) or not isinstance(todo_id, int):
        return False
    return todo_id > 0


def is_valid_progress(progress: Optional[float]) -> bool:
    """
    Check that a progress value lies in [0.0, 1.0].

    Args:
        progress: Fractional completion value

    Returns:
        True if the value is a finite number inside the closed range
    """
    if progress is None or isinstance(progress, bool):
        return False
    try:
        value = float(progress)
    except (TypeError, ValueError):
        return False
    if math.isnan(value):
        return False
    return MIN_PROGRESS <= value <= MAX_PROGRESS
