"""
Week window calculations.

Weeks run Monday to Sunday. The week number counts 7-day blocks from
January 1, with the (possibly partial) block containing January 1 as
week 1. Number and year are taken from the window's Sunday so every
day of a span maps to the same window, including spans that cross
New Year.
"""

import math
from datetime import date, timedelta
from typing import Optional

from exceptions import ValidationError
from models.report import WeekWindow

DAYS_PER_WEEK = 7


def week_for_date(day: date) -> WeekWindow:
    """
    Get the Monday-to-Sunday window containing a date.

    Examples:
        2026-10-17 (Sat) -> 2026-10-12 .. 2026-10-18
        2026-01-01 (Thu) -> 2025-12-29 .. 2026-01-04, week 1 of 2026
    """
    start = day - timedelta(days=day.weekday())
    end = start + timedelta(days=DAYS_PER_WEEK - 1)

    year = end.year
    jan_first = date(year, 1, 1)
    days_since_jan_first = (end - jan_first).days
    week_number = math.ceil(
        (days_since_jan_first + jan_first.weekday() + 1) / DAYS_PER_WEEK
    )

    return WeekWindow(
        week_start_date=start,
        week_end_date=end,
        week_number=week_number,
        year=year,
    )


def current_week(today: Optional[date] = None) -> WeekWindow:
    """Window containing today."""
    return week_for_date(today or date.today())


def shift_week(window: WeekWindow, weeks: int) -> WeekWindow:
    """Window `weeks` weeks after (negative: before) the given one."""
    return week_for_date(window.week_start_date + timedelta(weeks=weeks))


def previous_week(window: WeekWindow) -> WeekWindow:
    """Window exactly 7 days earlier."""
    return shift_week(window, -1)


def week_options(
    window: WeekWindow,
    past_count: int,
    future_count: int
) -> list[WeekWindow]:
    """
    Windows offered by the week selector.

    Order: the reference window, then past weeks from most recent to
    oldest, then future weeks from nearest to furthest.
    """
    options = [window]
    options.extend(shift_week(window, -i) for i in range(1, past_count + 1))
    options.extend(shift_week(window, i) for i in range(1, future_count + 1))
    return options


def parse_window(week_start_date: date, week_end_date: Optional[date] = None) -> WeekWindow:
    """
    Rebuild a window from stored dates.

    The start date decides the window; an end date that does not close
    the same Monday-to-Sunday span is rejected.
    """
    window = week_for_date(week_start_date)
    if window.week_start_date != week_start_date:
        raise ValidationError(
            "week_start_date must be a Monday",
            details={"week_start_date": week_start_date.isoformat()}
        )
    if week_end_date is not None and week_end_date != window.week_end_date:
        raise ValidationError(
            "week_end_date must be the Sunday after week_start_date",
            details={
                "week_start_date": week_start_date.isoformat(),
                "week_end_date": week_end_date.isoformat(),
            }
        )
    return window
