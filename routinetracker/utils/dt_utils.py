# File: utils/dt_utils.py
"""Calendar date utilities for Routine Tracker.

Pure Python calendar arithmetic over timezone-naive `datetime.date` values.
All functions here can be unit tested without any fixtures.

Uses standard library: datetime, calendar. Uses dateutil for weekday
offsets (relativedelta) and date iteration (rrule).

Functions:
    - dt_today: Get today's calendar date
    - dt_parse_date: Normalize persisted date values
    - is_leap_year: Proleptic Gregorian leap-year rule
    - last_day_of_month: Number of days in a month
    - build_date: Leap-aware date construction (None if the day doesn't exist)
    - clamp_date: Date construction clamped to the month length
    - nth_weekday_of_month: Resolve "the Nth <weekday> of the month"
    - weekday_ordinals: All month ordinals a date satisfies
    - iter_dates: Inclusive daily iteration
    - days_between: Whole days between two dates
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta, weekday as rd_weekday
from dateutil.rrule import DAILY, rrule

if TYPE_CHECKING:
    from collections.abc import Iterator

# ==============================================================================
# Constants (local copies to avoid circular imports)
# These mirror const.py values but are defined locally for purity.
# ==============================================================================

ORDINAL_FIRST = "first"
ORDINAL_SECOND = "second"
ORDINAL_THIRD = "third"
ORDINAL_FOURTH = "fourth"
ORDINAL_FIFTH = "fifth"
ORDINAL_LAST = "last"

_ORDINAL_NUMBERS = {
    ORDINAL_FIRST: 1,
    ORDINAL_SECOND: 2,
    ORDINAL_THIRD: 3,
    ORDINAL_FOURTH: 4,
    ORDINAL_FIFTH: 5,
}

_NUMBER_ORDINALS = {number: ordinal for ordinal, number in _ORDINAL_NUMBERS.items()}

DAYS_IN_WEEK = 7


# ==============================================================================
# Current Date
# ==============================================================================


def dt_today() -> date:
    """Return today's calendar date.

    Dates are timezone-naive throughout the package; the caller's local
    calendar day is used.

    Example:
        datetime.date(2025, 4, 7)
    """
    return date.today()


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(value: str | date | datetime | None) -> date | None:
    """Safely normalize a persisted date value into a `datetime.date`.

    Accepts `date`, `datetime` (time is dropped) and ISO "YYYY-MM-DD"
    strings.

    Returns:
        datetime.date or None if the value can't be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


# ==============================================================================
# Month Arithmetic
# ==============================================================================


def is_leap_year(year: int) -> bool:
    """Return True for leap years (divisible by 4, centuries only by 400)."""
    return calendar.isleap(year)


def last_day_of_month(year: int, month: int) -> int:
    """Return the last day number (28-31) of a month.

    Examples:
        last_day_of_month(2024, 2) → 29
        last_day_of_month(2023, 2) → 28
        last_day_of_month(1900, 2) → 28
        last_day_of_month(2000, 2) → 29
    """
    return calendar.monthrange(year, month)[1]


def is_last_day_of_month(validation_date: date) -> bool:
    """Return True if the date is the final day of its month."""
    return validation_date.day == last_day_of_month(
        validation_date.year, validation_date.month
    )


def build_date(year: int, month: int, day: int) -> date | None:
    """Construct a date, returning None if it doesn't exist in that year.

    Used where a month/day pair must not be silently shifted, e.g. an annual
    Feb 29 occurrence in a non-leap year.

    Examples:
        build_date(2024, 2, 29) → date(2024, 2, 29)
        build_date(2025, 2, 29) → None
    """
    if not 1 <= month <= 12:
        return None
    if not 1 <= day <= last_day_of_month(year, month):
        return None
    return date(year, month, day)


def clamp_date(year: int, month: int, day: int) -> date:
    """Construct a date, clamping the day to the month length.

    Examples:
        clamp_date(2025, 2, 29) → date(2025, 2, 28)
        clamp_date(2024, 4, 31) → date(2024, 4, 30)
    """
    return date(year, month, 1) + relativedelta(day=day)


# ==============================================================================
# Weekday-of-Month Resolution
# ==============================================================================


def nth_weekday_of_month(
    year: int, month: int, day_of_week: int, ordinal: str
) -> date | None:
    """Resolve "the Nth <weekday> of the month" to a concrete date.

    Args:
        year: Calendar year
        month: Month number (1-12)
        day_of_week: Weekday (0=Monday ... 6=Sunday)
        ordinal: One of the ORDINAL_* values

    Returns:
        The matching date, or None when the month has fewer occurrences
        (e.g. a fifth Monday in a month with four). ORDINAL_LAST always
        resolves.

    Raises:
        ValueError: Unknown ordinal or weekday.
    """
    if not 0 <= day_of_week < DAYS_IN_WEEK:
        raise ValueError(f"Invalid weekday: {day_of_week}")

    first_of_month = date(year, month, 1)

    if ordinal == ORDINAL_LAST:
        # day=31 clamps to the last day, then step back to the weekday
        return first_of_month + relativedelta(
            day=31, weekday=rd_weekday(day_of_week, -1)
        )

    number = _ORDINAL_NUMBERS.get(ordinal)
    if number is None:
        raise ValueError(f"Invalid ordinal: {ordinal}")

    result = first_of_month + relativedelta(weekday=rd_weekday(day_of_week, number))
    if result.month != month:
        return None
    return result


def weekday_ordinals(validation_date: date) -> frozenset[str]:
    """Return every month ordinal the date satisfies for its weekday.

    A date can be both the fourth and the last occurrence of its weekday;
    both ordinals are returned in that case.

    Examples:
        weekday_ordinals(date(2024, 1, 28)) → {"fourth", "last"}
        weekday_ordinals(date(2024, 3, 24)) → {"fourth"}
    """
    ordinals = {_NUMBER_ORDINALS[(validation_date.day - 1) // DAYS_IN_WEEK + 1]}
    if validation_date.day + DAYS_IN_WEEK > last_day_of_month(
        validation_date.year, validation_date.month
    ):
        ordinals.add(ORDINAL_LAST)
    return frozenset(ordinals)


# ==============================================================================
# Ranges
# ==============================================================================


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive.

    Yields nothing when end precedes start.
    """
    if end < start:
        return
    rule = rrule(
        DAILY,
        dtstart=datetime.combine(start, datetime.min.time()),
        until=datetime.combine(end, datetime.min.time()),
    )
    for occurrence in rule:
        yield occurrence.date()


def days_between(start: date, end: date) -> int:
    """Return whole days from start to end (negative if end is earlier)."""
    return (end - start).days


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first and last date of a month."""
    return date(year, month, 1), date(year, month, last_day_of_month(year, month))


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Return (year, month) shifted by a number of months.

    Examples:
        shift_month(2024, 11, 3) → (2025, 2)
        shift_month(2024, 1, -1) → (2023, 12)
    """
    shifted = date(year, month, 1) + relativedelta(months=months)
    return shifted.year, shifted.month
