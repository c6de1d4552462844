"""Immutable value types for the Routine Tracker core.

Schedules are a closed union of frozen dataclasses. Evaluators match over the
union exhaustively (see engines/schedule_engine.py) instead of dispatching to
methods on the variants, so every decision table lives in one place.

HabitStatus is likewise a union of two enums: PlanningStatus for dates that
are not resolved yet and HistoricalStatus for resolved past dates.

All validation happens at construction time and raises ConfigurationError.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TypeAlias

from . import const
from .exceptions import ConfigurationError
from .utils.dt_utils import last_day_of_month

# Any leap year works; February must accept day 29
_LEAP_REFERENCE_YEAR = 2000


def _freeze(instance: object, name: str, values: Iterable) -> frozenset:
    """Replace a dataclass field with a frozenset of its values."""
    frozen = frozenset(values)
    object.__setattr__(instance, name, frozen)
    return frozen


# =============================================================================
# Calendar Value Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class AnnualDate:
    """A month and day without a year (e.g. "every March 14")."""

    month: int
    day_of_month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= const.MONTHS_IN_YEAR:
            raise ConfigurationError(
                const.DATA_MONTH, const.ERROR_INVALID_ANNUAL_DATE, str(self.month)
            )
        max_day = last_day_of_month(_LEAP_REFERENCE_YEAR, self.month)
        if not 1 <= self.day_of_month <= max_day:
            raise ConfigurationError(
                const.DATA_DAY_OF_MONTH,
                const.ERROR_INVALID_ANNUAL_DATE,
                f"{self.month}-{self.day_of_month}",
            )

    def matches(self, validation_date: date) -> bool:
        """Return True if the date falls on this month and day.

        Feb 29 only matches real Feb 29 dates, never Feb 28 of a common year.
        """
        return (
            validation_date.month == self.month
            and validation_date.day == self.day_of_month
        )


@dataclass(frozen=True, slots=True)
class WeekDayMonthRelated:
    """The Nth weekday of a month, e.g. "the last Sunday"."""

    day_of_week: int
    ordinal: str

    def __post_init__(self) -> None:
        if self.day_of_week not in const.WEEKDAYS:
            raise ConfigurationError(
                const.DATA_DAY_OF_WEEK,
                const.ERROR_INVALID_WEEKDAY,
                str(self.day_of_week),
            )
        if self.ordinal not in const.ORDINALS:
            raise ConfigurationError(
                const.DATA_ORDINAL, const.ERROR_INVALID_ORDINAL, str(self.ordinal)
            )


# =============================================================================
# Schedule Variants
# =============================================================================


@dataclass(frozen=True, slots=True)
class EveryDaySchedule:
    """Due on every date from the routine start."""


@dataclass(frozen=True, slots=True)
class WeeklySchedule:
    """Due on a fixed set of weekdays (0=Monday ... 6=Sunday)."""

    due_days_of_week: frozenset[int]

    def __post_init__(self) -> None:
        days = _freeze(self, "due_days_of_week", self.due_days_of_week)
        if not days:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK, const.ERROR_EMPTY_DUE_SET
            )
        if not days <= const.WEEKDAYS:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK,
                const.ERROR_INVALID_WEEKDAY,
                str(sorted(days - const.WEEKDAYS)),
            )


@dataclass(frozen=True, slots=True)
class MonthlySchedule:
    """Due on day indices, the last day, and/or Nth weekdays of each month.

    start_from_routine_start only changes how month windows are anchored
    (see ScheduleEngine.get_period_range); it never gates due-ness.
    """

    due_dates_indices: frozenset[int] = field(default_factory=frozenset)
    include_last_day_of_month: bool = False
    weekdays_month_related: frozenset[WeekDayMonthRelated] = field(
        default_factory=frozenset
    )
    start_from_routine_start: bool = True

    def __post_init__(self) -> None:
        indices = _freeze(self, "due_dates_indices", self.due_dates_indices)
        rules = _freeze(self, "weekdays_month_related", self.weekdays_month_related)
        if not indices and not rules and not self.include_last_day_of_month:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES_INDICES, const.ERROR_EMPTY_DUE_SET
            )
        invalid = [i for i in indices if not 1 <= i <= const.MAX_DAY_OF_MONTH]
        if invalid:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_INVALID_DAY_INDEX,
                str(sorted(invalid)),
            )


@dataclass(frozen=True, slots=True)
class PeriodicCustomSchedule:
    """Due on 1-based day offsets of a repeating N-day period.

    Periods are counted from the routine start date.
    """

    num_of_days_in_period: int
    due_dates_indices: frozenset[int]

    def __post_init__(self) -> None:
        indices = _freeze(self, "due_dates_indices", self.due_dates_indices)
        if self.num_of_days_in_period < 1:
            raise ConfigurationError(
                const.DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD,
                const.ERROR_INVALID_PERIOD,
                str(self.num_of_days_in_period),
            )
        if not indices:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES_INDICES, const.ERROR_EMPTY_DUE_SET
            )
        invalid = [i for i in indices if not 1 <= i <= self.num_of_days_in_period]
        if invalid:
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_INVALID_DAY_INDEX,
                str(sorted(invalid)),
            )


@dataclass(frozen=True, slots=True)
class CustomDateSchedule:
    """Due on an explicit, finite set of calendar dates."""

    due_dates: frozenset[date]

    def __post_init__(self) -> None:
        if not _freeze(self, "due_dates", self.due_dates):
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES, const.ERROR_EMPTY_DUE_SET
            )


@dataclass(frozen=True, slots=True)
class AnnualSchedule:
    """Due on month/day pairs every year.

    start_day_of_year marks where a "due year" window begins for consumers
    enumerating years; it never gates due-ness.
    """

    due_dates: frozenset[AnnualDate]
    start_day_of_year: AnnualDate = field(
        default_factory=lambda: AnnualDate(
            const.DEFAULT_START_DAY_OF_YEAR_MONTH, const.DEFAULT_START_DAY_OF_YEAR_DAY
        )
    )

    def __post_init__(self) -> None:
        if not _freeze(self, "due_dates", self.due_dates):
            raise ConfigurationError(
                const.DATA_SCHEDULE_DUE_DATES, const.ERROR_EMPTY_DUE_SET
            )


Schedule: TypeAlias = (
    EveryDaySchedule
    | WeeklySchedule
    | MonthlySchedule
    | PeriodicCustomSchedule
    | CustomDateSchedule
    | AnnualSchedule
)


# =============================================================================
# Habit Data
# =============================================================================


@dataclass(frozen=True, slots=True)
class Vacation:
    """A vacation interval; end_date None means open-ended."""

    start_date: date
    end_date: date | None = None

    def __post_init__(self) -> None:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ConfigurationError(
                const.DATA_VACATION_END_DATE,
                const.ERROR_INVALID_VACATION,
                f"{self.end_date} is before {self.start_date}",
            )

    def __contains__(self, validation_date: date) -> bool:
        if validation_date < self.start_date:
            return False
        return self.end_date is None or validation_date <= self.end_date


@dataclass(frozen=True, slots=True)
class CompletionRecord:
    """Number of times a habit was completed on one date."""

    date: date
    num_of_times_completed: float = 1.0

    def __post_init__(self) -> None:
        if self.num_of_times_completed < 0:
            raise ConfigurationError(
                "num_of_times_completed",
                const.ERROR_INVALID_VALUE,
                str(self.num_of_times_completed),
            )


@dataclass(frozen=True, slots=True)
class Habit:
    """A habit configuration: one schedule plus completion policy."""

    name: str
    schedule: Schedule
    routine_start_date: date
    required_completions: int = const.DEFAULT_REQUIRED_COMPLETIONS
    backlog_enabled: bool = const.DEFAULT_BACKLOG_ENABLED
    completing_ahead_enabled: bool = const.DEFAULT_COMPLETING_AHEAD_ENABLED
    backlog_window_days: int | None = const.DEFAULT_BACKLOG_WINDOW_DAYS
    vacations: tuple[Vacation, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "vacations", tuple(self.vacations))
        if not self.name.strip():
            raise ConfigurationError(
                const.DATA_HABIT_NAME, const.ERROR_INVALID_NAME, repr(self.name)
            )
        if self.required_completions < 1:
            raise ConfigurationError(
                const.DATA_HABIT_REQUIRED_COMPLETIONS,
                const.ERROR_INVALID_REQUIRED_COMPLETIONS,
                str(self.required_completions),
            )
        if self.backlog_window_days is not None and self.backlog_window_days < 1:
            raise ConfigurationError(
                const.DATA_HABIT_BACKLOG_WINDOW_DAYS,
                const.ERROR_INVALID_BACKLOG_WINDOW,
                str(self.backlog_window_days),
            )

    def vacation_on(self, validation_date: date) -> Vacation | None:
        """Return the vacation covering the date, if any."""
        for vacation in self.vacations:
            if validation_date in vacation:
                return vacation
        return None


# =============================================================================
# Statuses & Results
# =============================================================================


class PlanningStatus(Enum):
    """Status of a date that is today (unresolved) or in the future."""

    PLANNED = "planned"
    BACKLOG = "backlog"
    ALREADY_COMPLETED = "already_completed"
    NOT_DUE = "not_due"
    ON_VACATION = "on_vacation"


class HistoricalStatus(Enum):
    """Status of a resolved past date."""

    NOT_COMPLETED = "not_completed"
    COMPLETED = "completed"
    OVER_COMPLETED = "over_completed"
    OVER_COMPLETED_ON_VACATION = "over_completed_on_vacation"
    SORTED_OUT_BACKLOG = "sorted_out_backlog"
    SORTED_OUT_BACKLOG_ON_VACATION = "sorted_out_backlog_on_vacation"
    SKIPPED = "skipped"
    NOT_COMPLETED_ON_VACATION = "not_completed_on_vacation"
    COMPLETED_LATER = "completed_later"
    ALREADY_COMPLETED = "already_completed"


HabitStatus: TypeAlias = PlanningStatus | HistoricalStatus


@dataclass(frozen=True, slots=True)
class Streak:
    """An unbroken run of dates, both ends inclusive."""

    start_date: date
    end_date: date


@dataclass(frozen=True, slots=True)
class CalendarDateData:
    """Everything a calendar cell needs for one date."""

    status: HabitStatus
    included_in_streak: bool
    num_of_times_completed: float
