"""Type definitions for persisted Routine Tracker configuration.

These TypedDicts describe the JSON-friendly shapes exchanged with the
persistence layer. data_builders.py converts them into the immutable models
in models.py (and back).

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation happens in
data_builders.py.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

ScheduleType = Literal[
    "every_day",
    "weekly",
    "monthly",
    "periodic_custom",
    "custom_date",
    "annual",
]

Ordinal = Literal["first", "second", "third", "fourth", "fifth", "last"]


# =============================================================================
# Nested Values
# =============================================================================


class WeekDayMonthRelatedData(TypedDict):
    """The Nth weekday of a month."""

    day_of_week: int  # 0=Monday ... 6=Sunday
    ordinal: Ordinal


class AnnualDateData(TypedDict):
    """Month and day without a year."""

    month: int
    day_of_month: int


class VacationData(TypedDict):
    """A vacation interval; missing/None end_date means open-ended."""

    start_date: ISODate
    end_date: NotRequired[ISODate | None]


# =============================================================================
# Schedule Configuration
# =============================================================================


class ScheduleConfig(TypedDict):
    """Persisted schedule. Only the keys of the given type are present."""

    type: ScheduleType

    # weekly
    due_days_of_week: NotRequired[list[int]]

    # monthly / periodic_custom
    due_dates_indices: NotRequired[list[int]]

    # monthly
    include_last_day_of_month: NotRequired[bool]
    weekdays_month_related: NotRequired[list[WeekDayMonthRelatedData]]
    start_from_routine_start: NotRequired[bool]

    # periodic_custom
    num_of_days_in_period: NotRequired[int]

    # custom_date (ISO dates) / annual (AnnualDateData)
    due_dates: NotRequired[list[ISODate] | list[AnnualDateData]]

    # annual
    start_day_of_year: NotRequired[AnnualDateData]


# =============================================================================
# Habit Configuration
# =============================================================================


class HabitData(TypedDict):
    """Persisted habit configuration."""

    name: str
    schedule: ScheduleConfig
    routine_start_date: ISODate
    required_completions: NotRequired[int]
    backlog_enabled: NotRequired[bool]
    completing_ahead_enabled: NotRequired[bool]
    backlog_window_days: NotRequired[int | None]
    vacations: NotRequired[list[VacationData]]
