"""
Tests for incoming-todo window computation.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ValidationError
from app.services.date_ranges import (
    DateWindow,
    TodoRange,
    compute_window,
    end_of_day,
    sunday_based_weekday,
    to_local_naive,
)

WEDNESDAY = datetime(2026, 10, 21, 9, 30)
SATURDAY = datetime(2026, 10, 24, 23, 15)
SUNDAY = datetime(2026, 10, 25, 0, 0)


class TestTodoRangeParse:
    """Test resolving ranges from wire values."""

    def test_parse_member_names_case_insensitively(self):
        assert TodoRange.parse("Today") is TodoRange.TODAY
        assert TodoRange.parse("nextday") is TodoRange.NEXT_DAY
        assert TodoRange.parse(" CURRENTWEEK ") is TodoRange.CURRENT_WEEK

    def test_parse_ordinals(self):
        assert TodoRange.parse(0) is TodoRange.TODAY
        assert TodoRange.parse(1) is TodoRange.NEXT_DAY
        assert TodoRange.parse("2") is TodoRange.CURRENT_WEEK

    def test_parse_member_returns_it(self):
        assert TodoRange.parse(TodoRange.NEXT_DAY) is TodoRange.NEXT_DAY

    def test_parse_accepts_zero_padded_ordinals(self):
        assert TodoRange.parse("02") is TodoRange.CURRENT_WEEK
        assert TodoRange.parse("000") is TodoRange.TODAY

    @pytest.mark.parametrize(
        "value",
        ["Tomorrow", "", "3", "²", "١", "1" * 5000, 999, -1, True, None, 1.0],
    )
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(ValidationError) as exc_info:
            TodoRange.parse(value)
        assert exc_info.value.field == "range"
        assert "Today, NextDay, CurrentWeek" in exc_info.value.message

    def test_names_in_declaration_order(self):
        assert TodoRange.names() == ["Today", "NextDay", "CurrentWeek"]


class TestComputeWindow:
    """Test the window boundaries for each range."""

    def test_today_spans_the_calendar_day(self):
        window = compute_window(TodoRange.TODAY, WEDNESDAY)
        assert window.start == datetime(2026, 10, 21, 0, 0)
        assert window.end == datetime(2026, 10, 21, 23, 59, 59, 999999)

    def test_next_day_spans_tomorrow(self):
        window = compute_window(TodoRange.NEXT_DAY, WEDNESDAY)
        assert window.start == datetime(2026, 10, 22, 0, 0)
        assert window.end == datetime(2026, 10, 22, 23, 59, 59, 999999)

    def test_current_week_runs_from_today_through_saturday(self):
        window = compute_window(TodoRange.CURRENT_WEEK, WEDNESDAY)
        assert window.start == datetime(2026, 10, 21, 0, 0)
        assert window.end == datetime(2026, 10, 24, 23, 59, 59, 999999)

    def test_current_week_on_saturday_is_only_today(self):
        window = compute_window(TodoRange.CURRENT_WEEK, SATURDAY)
        assert window.start == datetime(2026, 10, 24, 0, 0)
        assert window.end == datetime(2026, 10, 24, 23, 59, 59, 999999)

    def test_current_week_on_sunday_covers_seven_days(self):
        window = compute_window(TodoRange.CURRENT_WEEK, SUNDAY)
        assert window.start == datetime(2026, 10, 25, 0, 0)
        assert window.end == datetime(2026, 10, 31, 23, 59, 59, 999999)

    def test_current_week_end_is_always_a_saturday(self):
        for offset in range(7):
            now = WEDNESDAY + timedelta(days=offset)
            window = compute_window(TodoRange.CURRENT_WEEK, now)
            assert sunday_based_weekday(window.end) == 6
            assert window.start <= now <= window.end
            assert window.end - window.start < timedelta(days=7)

    def test_consecutive_windows_do_not_overlap(self):
        today = compute_window(TodoRange.TODAY, WEDNESDAY)
        next_day = compute_window(TodoRange.NEXT_DAY, WEDNESDAY)
        assert today.end + timedelta(microseconds=1) == next_day.start

    def test_rejects_values_outside_the_enumeration(self):
        with pytest.raises(ValidationError):
            compute_window("Today", WEDNESDAY)


class TestHelpers:
    def test_sunday_based_weekday(self):
        assert sunday_based_weekday(SUNDAY) == 0
        assert sunday_based_weekday(WEDNESDAY) == 3
        assert sunday_based_weekday(SATURDAY) == 6

    def test_end_of_day_is_one_microsecond_before_midnight(self):
        assert end_of_day(WEDNESDAY) + timedelta(microseconds=1) == datetime(2026, 10, 22)

    def test_to_local_naive_keeps_naive_values(self):
        assert to_local_naive(WEDNESDAY) is WEDNESDAY

    def test_to_local_naive_converts_aware_values(self):
        aware = datetime(2026, 10, 21, 12, 0, tzinfo=timezone.utc)
        local = to_local_naive(aware)
        assert local.tzinfo is None
        assert local == aware.astimezone().replace(tzinfo=None)

    def test_date_window_is_immutable(self):
        window = DateWindow(start=WEDNESDAY, end=WEDNESDAY)
        with pytest.raises(AttributeError):
            window.start = SUNDAY
