"""Schedule Engine for Routine Tracker.

Decides whether a habit is due on a date, and enumerates due dates and
schedule periods.

- `is_due` is the single source of truth; every enumeration helper is
  built on it so the decision table below is evaluated in one place.
- `dateutil.relativedelta` handles month/year anchoring with clamping
  (an anchor on the 31st falls back to the 30th/28th/29th).

IMPORTANT: This module must NOT import from habit_manager.py to avoid
circular imports. Only import from const.py, models.py and utils.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, assert_never

from dateutil.relativedelta import relativedelta

from .. import const
from ..models import (
    AnnualSchedule,
    CustomDateSchedule,
    EveryDaySchedule,
    MonthlySchedule,
    PeriodicCustomSchedule,
    WeeklySchedule,
)
from ..utils.dt_utils import (
    clamp_date,
    days_between,
    is_last_day_of_month,
    iter_dates,
    month_range,
    weekday_ordinals,
)

if TYPE_CHECKING:
    from ..models import Schedule


class ScheduleEngine:
    """Pure logic engine for schedule due-ness.

    All methods are static - no instance state.
    """

    # =========================================================================
    # DUE PREDICATE
    # =========================================================================

    @staticmethod
    def is_due(
        validation_date: date, routine_start_date: date, schedule: Schedule
    ) -> bool:
        """Return True if the habit is due on validation_date.

        Dates before routine_start_date are never due, whatever the schedule.

        Args:
            validation_date: The date being checked
            routine_start_date: Anchor date of the habit
            schedule: A validated Schedule variant

        Returns:
            True if an occurrence is expected on the date
        """
        if validation_date < routine_start_date:
            return False

        match schedule:
            case EveryDaySchedule():
                return True

            case WeeklySchedule(due_days_of_week=due_days):
                return validation_date.weekday() in due_days

            case MonthlySchedule():
                return ScheduleEngine._is_due_monthly(validation_date, schedule)

            case PeriodicCustomSchedule(
                num_of_days_in_period=period, due_dates_indices=indices
            ):
                offset = days_between(routine_start_date, validation_date) % period
                # Indices count from 1
                return offset + 1 in indices

            case CustomDateSchedule(due_dates=due_dates):
                return validation_date in due_dates

            case AnnualSchedule(due_dates=due_dates):
                return any(annual.matches(validation_date) for annual in due_dates)

            case _:
                assert_never(schedule)

    @staticmethod
    def _is_due_monthly(validation_date: date, schedule: MonthlySchedule) -> bool:
        """Check the three monthly due sources; any match makes the date due."""
        if validation_date.day in schedule.due_dates_indices:
            return True

        if schedule.include_last_day_of_month and is_last_day_of_month(validation_date):
            return True

        if not schedule.weekdays_month_related:
            return False

        # Non-exclusive: the 4th Sunday that is also the last matches both rules
        ordinals = weekday_ordinals(validation_date)
        return any(
            rule.day_of_week == validation_date.weekday() and rule.ordinal in ordinals
            for rule in schedule.weekdays_month_related
        )

    # =========================================================================
    # ENUMERATION
    # =========================================================================

    @staticmethod
    def get_due_dates(
        schedule: Schedule, routine_start_date: date, start: date, end: date
    ) -> list[date]:
        """Return every due date in [start, end], oldest first.

        Args:
            schedule: A validated Schedule variant
            routine_start_date: Anchor date of the habit
            start: Range start (inclusive)
            end: Range end (inclusive)

        Returns:
            Sorted list of due dates (empty if end precedes start).
        """
        start = max(start, routine_start_date)

        if isinstance(schedule, CustomDateSchedule):
            return sorted(d for d in schedule.due_dates if start <= d <= end)

        return [
            d
            for d in iter_dates(start, end)
            if ScheduleEngine.is_due(d, routine_start_date, schedule)
        ]

    @staticmethod
    def get_next_due_date(
        schedule: Schedule,
        routine_start_date: date,
        after: date,
        inclusive: bool = False,
    ) -> date | None:
        """Return the first due date after a reference date.

        Args:
            schedule: A validated Schedule variant
            routine_start_date: Anchor date of the habit
            after: Reference date
            inclusive: If True, `after` itself may be returned

        Returns:
            The next due date, or None if none exists within
            MAX_DUE_DATE_SEARCH_DAYS (or ever, for custom dates).
        """
        candidate = after if inclusive else after + timedelta(days=1)
        candidate = max(candidate, routine_start_date)

        if isinstance(schedule, CustomDateSchedule):
            upcoming = [d for d in schedule.due_dates if d >= candidate]
            return min(upcoming) if upcoming else None

        for _ in range(const.MAX_DUE_DATE_SEARCH_DAYS):
            if ScheduleEngine.is_due(candidate, routine_start_date, schedule):
                return candidate
            candidate += timedelta(days=1)

        const.LOGGER.warning(
            "ScheduleEngine: No due date within %d days after %s",
            const.MAX_DUE_DATE_SEARCH_DAYS,
            after,
        )
        return None

    # =========================================================================
    # PERIOD WINDOWS
    # =========================================================================

    @staticmethod
    def get_period_range(
        schedule: Schedule, routine_start_date: date, validation_date: date
    ) -> tuple[date, date] | None:
        """Return the schedule period (inclusive) that contains a date.

        - EveryDay: the day itself
        - Weekly: Monday through Sunday
        - Monthly: the calendar month, or the month anchored on the routine
          start day when start_from_routine_start is set
        - PeriodicCustom: the N-day period counted from the routine start
        - Annual: the year beginning at start_day_of_year
        - CustomDate: no periods (None)

        Returns:
            (period_start, period_end), or None for dates before the
            routine start and for custom-date schedules.
        """
        if validation_date < routine_start_date:
            return None

        match schedule:
            case EveryDaySchedule():
                return validation_date, validation_date

            case WeeklySchedule():
                week_start = validation_date - timedelta(days=validation_date.weekday())
                return week_start, week_start + timedelta(days=const.DAYS_IN_WEEK - 1)

            case MonthlySchedule(start_from_routine_start=anchored):
                if not anchored:
                    return month_range(validation_date.year, validation_date.month)
                return ScheduleEngine._anchored_month_range(
                    routine_start_date, validation_date
                )

            case PeriodicCustomSchedule(num_of_days_in_period=period):
                elapsed = days_between(routine_start_date, validation_date)
                period_start = routine_start_date + timedelta(
                    days=elapsed - elapsed % period
                )
                return period_start, period_start + timedelta(days=period - 1)

            case CustomDateSchedule():
                return None

            case AnnualSchedule(start_day_of_year=start_day):
                return ScheduleEngine._annual_range(
                    start_day.month, start_day.day_of_month, validation_date
                )

            case _:
                assert_never(schedule)

    @staticmethod
    def _anchored_month_range(
        routine_start_date: date, validation_date: date
    ) -> tuple[date, date]:
        """Month window whose boundary is the routine start day of month.

        Anchors are recomputed from the start date each month, so a start on
        the 31st clamps to shorter months without drifting.
        """
        months = (validation_date.year - routine_start_date.year) * 12 + (
            validation_date.month - routine_start_date.month
        )
        period_start = routine_start_date + relativedelta(months=months)
        if period_start > validation_date:
            months -= 1
            period_start = routine_start_date + relativedelta(months=months)
        next_start = routine_start_date + relativedelta(months=months + 1)
        return period_start, next_start - timedelta(days=1)

    @staticmethod
    def _annual_range(month: int, day: int, validation_date: date) -> tuple[date, date]:
        """Year window starting each year on (month, day), clamped for Feb 29."""
        year_start = clamp_date(validation_date.year, month, day)
        if year_start > validation_date:
            year_start = clamp_date(validation_date.year - 1, month, day)
        next_start = clamp_date(year_start.year + 1, month, day)
        return year_start, next_start - timedelta(days=1)
