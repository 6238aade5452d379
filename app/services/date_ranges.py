"""
Incoming-Todo Date Ranges

This module turns a named range (Today, NextDay, CurrentWeek) into the
concrete [start, end] window used to select todos by deadline.

Design Decisions:
- TodoRange is a closed Enum; anything outside it is rejected with
  ValidationError instead of falling back to a default window
- Windows are inclusive on both ends; "end of day" is the last
  representable instant before the next midnight (one microsecond before)
- Weeks end on Saturday and the current-week window starts today, not on
  the most recent Sunday
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import List, Union

from app.core.exceptions import ValidationError

ONE_TICK = timedelta(microseconds=1)
SATURDAY = 6  # Sunday = 0 ... Saturday = 6


class TodoRange(str, Enum):
    """Named windows for incoming-todo queries."""
    TODAY = "Today"
    NEXT_DAY = "NextDay"
    CURRENT_WEEK = "CurrentWeek"

    @classmethod
    def names(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: Union["TodoRange", str, int]) -> "TodoRange":
        """
        Resolve a range from its member, its name (case-insensitive) or its
        ordinal position (0 = Today, 1 = NextDay, 2 = CurrentWeek).

        Raises:
            ValidationError: If the value names no range
        """
        if isinstance(value, cls):
            return value

        members = list(cls)
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(members):
                return members[value]
        elif isinstance(value, str):
            candidate = value.strip()
            if candidate.isascii() and candidate.isdigit():
                # Compared as text so arbitrarily long digit strings never reach int()
                ordinal = candidate.lstrip("0") or "0"
                for index, member in enumerate(members):
                    if str(index) == ordinal:
                        return member
            for member in members:
                if member.value.lower() == candidate.lower():
                    return member

        raise ValidationError(
            f"Invalid range '{value}'. Valid values are: {', '.join(cls.names())}",
            field="range",
        )


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [start, end] window of deadlines."""
    start: datetime
    end: datetime


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return start_of_day(moment) + timedelta(days=1) - ONE_TICK


def sunday_based_weekday(moment: datetime) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6 (datetime uses Monday = 0)."""
    return (moment.weekday() + 1) % 7


def to_local_naive(moment: datetime) -> datetime:
    """
    Express a timestamp as naive local wall-clock time.

    Naive values are taken as already local. Aware values are converted to
    the local zone and stripped of tzinfo so they compare with stored
    deadlines.
    """
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def compute_window(todo_range: TodoRange, now: datetime) -> DateWindow:
    """
    Compute the deadline window for a range relative to `now`.

    Args:
        todo_range: Which window to compute
        now: The current moment

    Returns:
        DateWindow with inclusive bounds

    Raises:
        ValidationError: If todo_range is not a TodoRange member
    """
    today = start_of_day(now)

    if todo_range is TodoRange.TODAY:
        return DateWindow(start=today, end=end_of_day(today))

    if todo_range is TodoRange.NEXT_DAY:
        tomorrow = today + timedelta(days=1)
        return DateWindow(start=tomorrow, end=end_of_day(tomorrow))

    if todo_range is TodoRange.CURRENT_WEEK:
        days_until_saturday = SATURDAY - sunday_based_weekday(today)
        saturday = today + timedelta(days=days_until_saturday)
        return DateWindow(start=today, end=end_of_day(saturday))

    raise ValidationError(f"Invalid range '{todo_range}'", field="range")
