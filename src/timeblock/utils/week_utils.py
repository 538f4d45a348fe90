"""Date windows for the week strip and the month date picker."""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from timeblock.models.week_day import WeekDay
from timeblock.utils.time_utils import DateLike

# Sunday-first, matching the weekday numbering used by the week window
DAY_NAMES = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _sunday_index(value: date) -> int:
    # date.weekday() is Monday=0; the week window counts from Sunday=0
    return (value.weekday() + 1) % 7


def get_week_days(reference_date: DateLike, selected_date: Optional[DateLike] = None) -> List[WeekDay]:
    """
    Get the 7 days of the week view, starting on the Wednesday on or before
    the reference date.

    is_selected is a calendar-day comparison against selected_date; with no
    selected_date nothing is selected.
    """
    current = _as_date(reference_date)
    selected = _as_date(selected_date) if selected_date is not None else None

    days_to_subtract = (_sunday_index(current) + 4) % 7
    start_date = current - timedelta(days=days_to_subtract)

    days = []
    for i in range(7):
        day = start_date + timedelta(days=i)
        days.append(WeekDay(
            weekday_name=DAY_NAMES[_sunday_index(day)],
            day_of_month=day.day,
            full_date=day,
            is_selected=selected is not None and day == selected,
        ))
    return days


def get_calendar_days(year: int, month: int) -> List[Optional[int]]:
    """Cells of the date picker grid: blanks before the 1st, then each day of the month"""
    first_weekday = _sunday_index(date(year, month, 1))
    days_in_month = calendar.monthrange(year, month)[1]
    return [None] * first_weekday + list(range(1, days_in_month + 1))


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move a (year, month) pair by delta months, rolling the year over"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
