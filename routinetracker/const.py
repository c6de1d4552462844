# File: const.py
"""Constants for the Routine Tracker core.

This file centralizes configuration keys, defaults, schedule type names,
weekday and ordinal identifiers, and error keys for consistency across
the package.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------------------------
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------

# Completions needed on a due date for it to count as completed
DEFAULT_REQUIRED_COMPLETIONS: Final = 1

# Missed due dates can be made up on later dates
DEFAULT_BACKLOG_ENABLED: Final = True

# Surplus completions cover upcoming due dates
DEFAULT_COMPLETING_AHEAD_ENABLED: Final = True

# None = missed dates stay eligible for backlog forever
DEFAULT_BACKLOG_WINDOW_DAYS: Final[int | None] = None

# Calendar months loaded on each side of the displayed month
NUM_OF_MONTHS_TO_LOAD_AHEAD: Final = 3

# Safety limit for next-due-date searches (8 years covers every Feb 29 gap)
MAX_DUE_DATE_SEARCH_DAYS: Final = 366 * 8

# Start of the annual window when none is configured
DEFAULT_START_DAY_OF_YEAR_MONTH: Final = 1
DEFAULT_START_DAY_OF_YEAR_DAY: Final = 1

# ------------------------------------------------------------------------------------------------
# Weekdays (match datetime.date.weekday())
# ------------------------------------------------------------------------------------------------
MONDAY: Final = 0
TUESDAY: Final = 1
WEDNESDAY: Final = 2
THURSDAY: Final = 3
FRIDAY: Final = 4
SATURDAY: Final = 5
SUNDAY: Final = 6

WEEKDAYS: Final = frozenset(range(7))

DAYS_IN_WEEK: Final = 7
MAX_DAY_OF_MONTH: Final = 31
MONTHS_IN_YEAR: Final = 12

# ------------------------------------------------------------------------------------------------
# Week Day Ordinals (Nth weekday of month)
# ------------------------------------------------------------------------------------------------
ORDINAL_FIRST: Final = "first"
ORDINAL_SECOND: Final = "second"
ORDINAL_THIRD: Final = "third"
ORDINAL_FOURTH: Final = "fourth"
ORDINAL_FIFTH: Final = "fifth"
ORDINAL_LAST: Final = "last"

# Numbered ordinals, in month order
ORDINAL_NUMBERS: Final[dict[str, int]] = {
    ORDINAL_FIRST: 1,
    ORDINAL_SECOND: 2,
    ORDINAL_THIRD: 3,
    ORDINAL_FOURTH: 4,
    ORDINAL_FIFTH: 5,
}

ORDINALS: Final = frozenset({*ORDINAL_NUMBERS, ORDINAL_LAST})

# ------------------------------------------------------------------------------------------------
# Schedule Types
# ------------------------------------------------------------------------------------------------
SCHEDULE_TYPE_EVERY_DAY: Final = "every_day"
SCHEDULE_TYPE_WEEKLY: Final = "weekly"
SCHEDULE_TYPE_MONTHLY: Final = "monthly"
SCHEDULE_TYPE_PERIODIC_CUSTOM: Final = "periodic_custom"
SCHEDULE_TYPE_CUSTOM_DATE: Final = "custom_date"
SCHEDULE_TYPE_ANNUAL: Final = "annual"

SCHEDULE_TYPES: Final = (
    SCHEDULE_TYPE_EVERY_DAY,
    SCHEDULE_TYPE_WEEKLY,
    SCHEDULE_TYPE_MONTHLY,
    SCHEDULE_TYPE_PERIODIC_CUSTOM,
    SCHEDULE_TYPE_CUSTOM_DATE,
    SCHEDULE_TYPE_ANNUAL,
)

# ------------------------------------------------------------------------------------------------
# Persisted Data Keys
# ------------------------------------------------------------------------------------------------

# Schedule
DATA_SCHEDULE_TYPE: Final = "type"
DATA_SCHEDULE_DUE_DAYS_OF_WEEK: Final = "due_days_of_week"
DATA_SCHEDULE_DUE_DATES_INDICES: Final = "due_dates_indices"
DATA_SCHEDULE_INCLUDE_LAST_DAY_OF_MONTH: Final = "include_last_day_of_month"
DATA_SCHEDULE_WEEKDAYS_MONTH_RELATED: Final = "weekdays_month_related"
DATA_SCHEDULE_START_FROM_ROUTINE_START: Final = "start_from_routine_start"
DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD: Final = "num_of_days_in_period"
DATA_SCHEDULE_DUE_DATES: Final = "due_dates"
DATA_SCHEDULE_START_DAY_OF_YEAR: Final = "start_day_of_year"

# Nested values
DATA_DAY_OF_WEEK: Final = "day_of_week"
DATA_ORDINAL: Final = "ordinal"
DATA_MONTH: Final = "month"
DATA_DAY_OF_MONTH: Final = "day_of_month"

# Habit
DATA_HABIT_NAME: Final = "name"
DATA_HABIT_SCHEDULE: Final = "schedule"
DATA_HABIT_ROUTINE_START_DATE: Final = "routine_start_date"
DATA_HABIT_REQUIRED_COMPLETIONS: Final = "required_completions"
DATA_HABIT_BACKLOG_ENABLED: Final = "backlog_enabled"
DATA_HABIT_COMPLETING_AHEAD_ENABLED: Final = "completing_ahead_enabled"
DATA_HABIT_BACKLOG_WINDOW_DAYS: Final = "backlog_window_days"
DATA_HABIT_VACATIONS: Final = "vacations"

# Vacation
DATA_VACATION_START_DATE: Final = "start_date"
DATA_VACATION_END_DATE: Final = "end_date"

# ------------------------------------------------------------------------------------------------
# Validation Error Keys
# ------------------------------------------------------------------------------------------------
ERROR_INVALID_SCHEDULE_TYPE: Final = "invalid_schedule_type"
ERROR_INVALID_VALUE: Final = "invalid_value"
ERROR_EMPTY_DUE_SET: Final = "empty_due_set"
ERROR_INVALID_WEEKDAY: Final = "invalid_weekday"
ERROR_INVALID_ORDINAL: Final = "invalid_ordinal"
ERROR_INVALID_DAY_INDEX: Final = "invalid_day_index"
ERROR_INVALID_PERIOD: Final = "invalid_period"
ERROR_INVALID_ANNUAL_DATE: Final = "invalid_annual_date"
ERROR_INVALID_REQUIRED_COMPLETIONS: Final = "invalid_required_completions"
ERROR_INVALID_BACKLOG_WINDOW: Final = "invalid_backlog_window"
ERROR_INVALID_VACATION: Final = "invalid_vacation"
ERROR_INVALID_NAME: Final = "invalid_name"
