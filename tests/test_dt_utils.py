"""Tests for utils/dt_utils.py calendar arithmetic.

Pure functions, no fixtures needed.
"""

from datetime import date, datetime

import pytest

from routinetracker.utils import dt_utils
from routinetracker.utils.dt_utils import (
    build_date,
    clamp_date,
    days_between,
    dt_parse_date,
    is_last_day_of_month,
    is_leap_year,
    iter_dates,
    last_day_of_month,
    month_range,
    nth_weekday_of_month,
    shift_month,
    weekday_ordinals,
)

# =============================================================================
# LEAP YEARS & MONTH LENGTHS
# =============================================================================


class TestMonthLengths:
    """Leap-year rule and month lengths."""

    @pytest.mark.parametrize(
        ("year", "expected"),
        [(2024, True), (2023, False), (1900, False), (2000, True), (2100, False)],
    )
    def test_is_leap_year(self, year: int, expected: bool) -> None:
        """Divisible by 4, centuries only when divisible by 400."""
        assert is_leap_year(year) is expected

    @pytest.mark.parametrize(
        ("year", "month", "expected"),
        [
            (2024, 2, 29),
            (2023, 2, 28),
            (1900, 2, 28),
            (2000, 2, 29),
            (2024, 4, 30),
            (2024, 12, 31),
        ],
    )
    def test_last_day_of_month(self, year: int, month: int, expected: int) -> None:
        """Month lengths follow the Gregorian calendar."""
        assert last_day_of_month(year, month) == expected

    def test_is_last_day_of_month(self) -> None:
        """Only the final day of the month qualifies."""
        assert is_last_day_of_month(date(2024, 2, 29))
        assert not is_last_day_of_month(date(2023, 2, 27))
        assert is_last_day_of_month(date(2023, 2, 28))

    def test_build_date_rejects_missing_day(self) -> None:
        """Feb 29 exists only in leap years."""
        assert build_date(2024, 2, 29) == date(2024, 2, 29)
        assert build_date(2025, 2, 29) is None
        assert build_date(2025, 13, 1) is None

    def test_clamp_date(self) -> None:
        """Days past the month end clamp to the last day."""
        assert clamp_date(2025, 2, 29) == date(2025, 2, 28)
        assert clamp_date(2024, 4, 31) == date(2024, 4, 30)
        assert clamp_date(2024, 5, 15) == date(2024, 5, 15)


# =============================================================================
# WEEKDAY-OF-MONTH
# =============================================================================


class TestNthWeekday:
    """Resolving ordinals such as "the last Friday"."""

    def test_first_monday(self) -> None:
        """January 2024 starts on a Monday."""
        assert nth_weekday_of_month(2024, 1, 0, "first") == date(2024, 1, 1)

    def test_third_wednesday(self) -> None:
        """Third Wednesday of May 2024."""
        assert nth_weekday_of_month(2024, 5, 2, "third") == date(2024, 5, 15)

    def test_last_sunday(self) -> None:
        """March 2024 ends on a Sunday."""
        assert nth_weekday_of_month(2024, 3, 6, "last") == date(2024, 3, 31)

    def test_last_friday_february_common_year(self) -> None:
        """Last Friday of February 2023."""
        assert nth_weekday_of_month(2023, 2, 4, "last") == date(2023, 2, 24)

    def test_missing_fifth_occurrence(self) -> None:
        """February 2023 has only four Mondays."""
        assert nth_weekday_of_month(2023, 2, 0, "fifth") is None

    def test_existing_fifth_occurrence(self) -> None:
        """January 2024 has five Wednesdays."""
        assert nth_weekday_of_month(2024, 1, 2, "fifth") == date(2024, 1, 31)

    def test_invalid_inputs_raise(self) -> None:
        """Unknown ordinals and weekdays are rejected."""
        with pytest.raises(ValueError):
            nth_weekday_of_month(2024, 1, 7, "first")
        with pytest.raises(ValueError):
            nth_weekday_of_month(2024, 1, 0, "sixth")

    def test_weekday_ordinals_non_exclusive(self) -> None:
        """A fourth occurrence can also be the last one."""
        assert weekday_ordinals(date(2024, 1, 28)) == {"fourth", "last"}
        assert weekday_ordinals(date(2024, 3, 24)) == {"fourth"}
        assert weekday_ordinals(date(2024, 3, 31)) == {"fifth", "last"}
        assert weekday_ordinals(date(2024, 3, 1)) == {"first"}


# =============================================================================
# RANGES & PARSING
# =============================================================================


class TestRanges:
    """Inclusive iteration and month helpers."""

    def test_iter_dates_inclusive(self) -> None:
        """Both ends are yielded."""
        dates = list(iter_dates(date(2024, 2, 27), date(2024, 3, 1)))
        assert dates == [
            date(2024, 2, 27),
            date(2024, 2, 28),
            date(2024, 2, 29),
            date(2024, 3, 1),
        ]

    def test_iter_dates_reversed_is_empty(self) -> None:
        """Nothing is yielded when end precedes start."""
        assert list(iter_dates(date(2024, 3, 2), date(2024, 3, 1))) == []

    def test_days_between(self) -> None:
        """Signed whole-day difference."""
        assert days_between(date(2024, 1, 1), date(2024, 3, 1)) == 60
        assert days_between(date(2024, 3, 1), date(2024, 1, 1)) == -60

    def test_month_range(self) -> None:
        """First and last date of the month."""
        assert month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_shift_month(self) -> None:
        """Shifts roll over year boundaries."""
        assert shift_month(2024, 11, 3) == (2025, 2)
        assert shift_month(2024, 1, -1) == (2023, 12)

    def test_parse_date(self) -> None:
        """Dates, datetimes and ISO strings are accepted."""
        assert dt_parse_date("2024-05-06") == date(2024, 5, 6)
        assert dt_parse_date(datetime(2024, 5, 6, 13, 0)) == date(2024, 5, 6)
        assert dt_parse_date(date(2024, 5, 6)) == date(2024, 5, 6)
        assert dt_parse_date("not a date") is None
        assert dt_parse_date(None) is None
        assert dt_parse_date("") is None

    def test_ordinal_constants_match_const(self) -> None:
        """Local ordinal copies stay in sync with const.py."""
        from routinetracker import const

        assert dt_utils.ORDINAL_LAST == const.ORDINAL_LAST
        assert {
            dt_utils.ORDINAL_FIRST,
            dt_utils.ORDINAL_SECOND,
            dt_utils.ORDINAL_THIRD,
            dt_utils.ORDINAL_FOURTH,
            dt_utils.ORDINAL_FIFTH,
            dt_utils.ORDINAL_LAST,
        } == const.ORDINALS
