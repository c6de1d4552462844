"""Configuration builders for schedules and habits.

This module is the SINGLE SOURCE OF TRUTH for turning persisted configuration
into validated models, and models back into persisted configuration.

### Two validation layers
- voluptuous schemas (SCHEDULE_SCHEMAS, HABIT_SCHEMA, ...) check structure
  and coerce types (ISO date strings, numeric strings).
- Model constructors in models.py enforce business rules (non-empty due
  sets, ranges, leap-aware annual dates).

Both layers report failures as ConfigurationError with the offending
DATA_* field, so callers can map errors back to their inputs.

### Build Functions
- build_schedule(): ScheduleConfig -> Schedule
- build_habit(): HabitData -> Habit

### Validation Functions
- validate_schedule_data() / validate_habit_data(): dict of errors
  (empty if valid), for callers that prefer error maps over exceptions

### Serialization Functions
- schedule_to_config() / habit_to_config(): the inverse of the builders
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, assert_never, cast

import voluptuous as vol

from . import const
from .exceptions import ConfigurationError
from .models import (
    AnnualDate,
    AnnualSchedule,
    CustomDateSchedule,
    EveryDaySchedule,
    Habit,
    MonthlySchedule,
    PeriodicCustomSchedule,
    Vacation,
    WeekDayMonthRelated,
    WeeklySchedule,
)
from .utils.dt_utils import dt_parse_date

if TYPE_CHECKING:
    from .models import Schedule
    from .type_defs import (
        AnnualDateData,
        HabitData,
        ScheduleConfig,
        VacationData,
        WeekDayMonthRelatedData,
    )

# ==============================================================================
# VALIDATORS
# ==============================================================================


def _coerce_date(value: Any) -> date:
    """voluptuous validator: accept date objects or ISO date strings."""
    parsed = dt_parse_date(value)
    if parsed is None:
        raise vol.Invalid(f"invalid date: {value!r}")
    return parsed


def _sequence(value: Any) -> list[Any]:
    """voluptuous validator: accept any non-string iterable as a list."""
    if isinstance(value, str | bytes | dict):
        raise vol.Invalid("expected a list")
    try:
        return list(value)
    except TypeError as err:
        raise vol.Invalid("expected a list") from err


# ==============================================================================
# SCHEMAS
# ==============================================================================

WEEKDAY_MONTH_RELATED_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_DAY_OF_WEEK): vol.Coerce(int),
        vol.Required(const.DATA_ORDINAL): str,
    }
)

ANNUAL_DATE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_MONTH): vol.Coerce(int),
        vol.Required(const.DATA_DAY_OF_MONTH): vol.Coerce(int),
    }
)

VACATION_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_VACATION_START_DATE): _coerce_date,
        vol.Optional(const.DATA_VACATION_END_DATE, default=None): vol.Any(
            None, _coerce_date
        ),
    }
)

_TYPE_KEY = vol.Required(const.DATA_SCHEDULE_TYPE)

SCHEDULE_SCHEMAS: dict[str, vol.Schema] = {
    const.SCHEDULE_TYPE_EVERY_DAY: vol.Schema({_TYPE_KEY: str}),
    const.SCHEDULE_TYPE_WEEKLY: vol.Schema(
        {
            _TYPE_KEY: str,
            vol.Required(const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK): vol.All(
                _sequence, [vol.Coerce(int)]
            ),
        }
    ),
    const.SCHEDULE_TYPE_MONTHLY: vol.Schema(
        {
            _TYPE_KEY: str,
            vol.Optional(const.DATA_SCHEDULE_DUE_DATES_INDICES, default=list): vol.All(
                _sequence, [vol.Coerce(int)]
            ),
            vol.Optional(
                const.DATA_SCHEDULE_INCLUDE_LAST_DAY_OF_MONTH, default=False
            ): vol.Boolean(),
            vol.Optional(
                const.DATA_SCHEDULE_WEEKDAYS_MONTH_RELATED, default=list
            ): vol.All(_sequence, [WEEKDAY_MONTH_RELATED_SCHEMA]),
            vol.Optional(
                const.DATA_SCHEDULE_START_FROM_ROUTINE_START, default=True
            ): vol.Boolean(),
        }
    ),
    const.SCHEDULE_TYPE_PERIODIC_CUSTOM: vol.Schema(
        {
            _TYPE_KEY: str,
            vol.Required(const.DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD): vol.Coerce(int),
            vol.Required(const.DATA_SCHEDULE_DUE_DATES_INDICES): vol.All(
                _sequence, [vol.Coerce(int)]
            ),
        }
    ),
    const.SCHEDULE_TYPE_CUSTOM_DATE: vol.Schema(
        {
            _TYPE_KEY: str,
            vol.Required(const.DATA_SCHEDULE_DUE_DATES): vol.All(
                _sequence, [_coerce_date]
            ),
        }
    ),
    const.SCHEDULE_TYPE_ANNUAL: vol.Schema(
        {
            _TYPE_KEY: str,
            vol.Required(const.DATA_SCHEDULE_DUE_DATES): vol.All(
                _sequence, [ANNUAL_DATE_SCHEMA]
            ),
            vol.Optional(const.DATA_SCHEDULE_START_DAY_OF_YEAR): ANNUAL_DATE_SCHEMA,
        }
    ),
}

HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_HABIT_NAME): vol.All(str, vol.Strip),
        vol.Required(const.DATA_HABIT_SCHEDULE): dict,
        vol.Required(const.DATA_HABIT_ROUTINE_START_DATE): _coerce_date,
        vol.Optional(
            const.DATA_HABIT_REQUIRED_COMPLETIONS,
            default=const.DEFAULT_REQUIRED_COMPLETIONS,
        ): vol.Coerce(int),
        vol.Optional(
            const.DATA_HABIT_BACKLOG_ENABLED, default=const.DEFAULT_BACKLOG_ENABLED
        ): vol.Boolean(),
        vol.Optional(
            const.DATA_HABIT_COMPLETING_AHEAD_ENABLED,
            default=const.DEFAULT_COMPLETING_AHEAD_ENABLED,
        ): vol.Boolean(),
        vol.Optional(
            const.DATA_HABIT_BACKLOG_WINDOW_DAYS,
            default=const.DEFAULT_BACKLOG_WINDOW_DAYS,
        ): vol.Any(None, vol.Coerce(int)),
        vol.Optional(const.DATA_HABIT_VACATIONS, default=list): vol.All(
            _sequence, [VACATION_SCHEMA]
        ),
    }
)


def _validate(schema: vol.Schema, data: Any, error_key: str) -> dict[str, Any]:
    """Run a schema, converting voluptuous errors to ConfigurationError.

    The reported field is the top-level key of the first failing path.
    """
    try:
        return cast("dict[str, Any]", schema(data))
    except vol.MultipleInvalid as err:
        first = err.errors[0]
        field = str(first.path[0]) if first.path else const.DATA_SCHEDULE_TYPE
        raise ConfigurationError(field, error_key, first.error_message) from err


# ==============================================================================
# SCHEDULES
# ==============================================================================


def build_schedule(data: ScheduleConfig | dict[str, Any]) -> Schedule:
    """Build a validated Schedule from persisted configuration.

    Args:
        data: ScheduleConfig dict (DATA_SCHEDULE_* keys)

    Returns:
        One of the Schedule variants

    Raises:
        ConfigurationError: Unknown type, malformed values, or a variant
            whose required due set is empty
    """
    schedule_type = (
        data.get(const.DATA_SCHEDULE_TYPE) if isinstance(data, dict) else None
    )
    schema = (
        SCHEDULE_SCHEMAS.get(schedule_type) if isinstance(schedule_type, str) else None
    )
    if schema is None:
        raise ConfigurationError(
            const.DATA_SCHEDULE_TYPE,
            const.ERROR_INVALID_SCHEDULE_TYPE,
            repr(schedule_type),
        )

    validated = _validate(schema, data, const.ERROR_INVALID_VALUE)

    match schedule_type:
        case const.SCHEDULE_TYPE_EVERY_DAY:
            return EveryDaySchedule()

        case const.SCHEDULE_TYPE_WEEKLY:
            return WeeklySchedule(
                frozenset(validated[const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK])
            )

        case const.SCHEDULE_TYPE_MONTHLY:
            return MonthlySchedule(
                due_dates_indices=frozenset(
                    validated[const.DATA_SCHEDULE_DUE_DATES_INDICES]
                ),
                include_last_day_of_month=validated[
                    const.DATA_SCHEDULE_INCLUDE_LAST_DAY_OF_MONTH
                ],
                weekdays_month_related=frozenset(
                    WeekDayMonthRelated(
                        rule[const.DATA_DAY_OF_WEEK], rule[const.DATA_ORDINAL]
                    )
                    for rule in validated[const.DATA_SCHEDULE_WEEKDAYS_MONTH_RELATED]
                ),
                start_from_routine_start=validated[
                    const.DATA_SCHEDULE_START_FROM_ROUTINE_START
                ],
            )

        case const.SCHEDULE_TYPE_PERIODIC_CUSTOM:
            return PeriodicCustomSchedule(
                num_of_days_in_period=validated[
                    const.DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD
                ],
                due_dates_indices=frozenset(
                    validated[const.DATA_SCHEDULE_DUE_DATES_INDICES]
                ),
            )

        case const.SCHEDULE_TYPE_CUSTOM_DATE:
            return CustomDateSchedule(
                frozenset(validated[const.DATA_SCHEDULE_DUE_DATES])
            )

        case const.SCHEDULE_TYPE_ANNUAL:
            due_dates = frozenset(
                AnnualDate(item[const.DATA_MONTH], item[const.DATA_DAY_OF_MONTH])
                for item in validated[const.DATA_SCHEDULE_DUE_DATES]
            )
            start_day = validated.get(const.DATA_SCHEDULE_START_DAY_OF_YEAR)
            if start_day is None:
                return AnnualSchedule(due_dates)
            return AnnualSchedule(
                due_dates,
                AnnualDate(
                    start_day[const.DATA_MONTH], start_day[const.DATA_DAY_OF_MONTH]
                ),
            )

    # SCHEDULE_SCHEMAS and the cases above cover the same types
    raise ConfigurationError(
        const.DATA_SCHEDULE_TYPE, const.ERROR_INVALID_SCHEDULE_TYPE
    )


def validate_schedule_data(data: ScheduleConfig | dict[str, Any]) -> dict[str, str]:
    """Validate schedule configuration without raising.

    Returns:
        Dict of errors: {field: error_key}. Empty dict means valid.
    """
    try:
        build_schedule(data)
    except ConfigurationError as err:
        return {err.field: err.error_key}
    return {}


def _annual_date_to_config(annual: AnnualDate) -> AnnualDateData:
    return cast(
        "AnnualDateData",
        {const.DATA_MONTH: annual.month, const.DATA_DAY_OF_MONTH: annual.day_of_month},
    )


def _weekday_rule_to_config(rule: WeekDayMonthRelated) -> WeekDayMonthRelatedData:
    return cast(
        "WeekDayMonthRelatedData",
        {const.DATA_DAY_OF_WEEK: rule.day_of_week, const.DATA_ORDINAL: rule.ordinal},
    )


def schedule_to_config(schedule: Schedule) -> ScheduleConfig:
    """Serialize a Schedule into persisted configuration.

    Sets are written as sorted lists so the output is stable.
    """
    config: dict[str, Any]
    match schedule:
        case EveryDaySchedule():
            config = {const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_EVERY_DAY}

        case WeeklySchedule():
            config = {
                const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_WEEKLY,
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK: sorted(
                    schedule.due_days_of_week
                ),
            }

        case MonthlySchedule():
            rules = sorted(
                schedule.weekdays_month_related,
                key=lambda rule: (rule.day_of_week, rule.ordinal),
            )
            config = {
                const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_MONTHLY,
                const.DATA_SCHEDULE_DUE_DATES_INDICES: sorted(
                    schedule.due_dates_indices
                ),
                const.DATA_SCHEDULE_INCLUDE_LAST_DAY_OF_MONTH: (
                    schedule.include_last_day_of_month
                ),
                const.DATA_SCHEDULE_WEEKDAYS_MONTH_RELATED: [
                    _weekday_rule_to_config(r) for r in rules
                ],
                const.DATA_SCHEDULE_START_FROM_ROUTINE_START: (
                    schedule.start_from_routine_start
                ),
            }

        case PeriodicCustomSchedule():
            config = {
                const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_PERIODIC_CUSTOM,
                const.DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD: (
                    schedule.num_of_days_in_period
                ),
                const.DATA_SCHEDULE_DUE_DATES_INDICES: sorted(
                    schedule.due_dates_indices
                ),
            }

        case CustomDateSchedule():
            config = {
                const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_CUSTOM_DATE,
                const.DATA_SCHEDULE_DUE_DATES: [
                    d.isoformat() for d in sorted(schedule.due_dates)
                ],
            }

        case AnnualSchedule():
            annual_dates = sorted(
                schedule.due_dates, key=lambda a: (a.month, a.day_of_month)
            )
            config = {
                const.DATA_SCHEDULE_TYPE: const.SCHEDULE_TYPE_ANNUAL,
                const.DATA_SCHEDULE_DUE_DATES: [
                    _annual_date_to_config(a) for a in annual_dates
                ],
                const.DATA_SCHEDULE_START_DAY_OF_YEAR: _annual_date_to_config(
                    schedule.start_day_of_year
                ),
            }

        case _:
            assert_never(schedule)

    return cast("ScheduleConfig", config)


# ==============================================================================
# HABITS
# ==============================================================================


def build_habit(data: HabitData | dict[str, Any]) -> Habit:
    """Build a validated Habit from persisted configuration.

    Raises:
        ConfigurationError: Any invalid field, including the nested schedule
            and vacations
    """
    validated = _validate(HABIT_SCHEMA, data, const.ERROR_INVALID_VALUE)
    schedule = build_schedule(validated[const.DATA_HABIT_SCHEDULE])
    vacations = tuple(
        Vacation(
            vacation[const.DATA_VACATION_START_DATE],
            vacation[const.DATA_VACATION_END_DATE],
        )
        for vacation in validated[const.DATA_HABIT_VACATIONS]
    )
    habit = Habit(
        name=validated[const.DATA_HABIT_NAME],
        schedule=schedule,
        routine_start_date=validated[const.DATA_HABIT_ROUTINE_START_DATE],
        required_completions=validated[const.DATA_HABIT_REQUIRED_COMPLETIONS],
        backlog_enabled=validated[const.DATA_HABIT_BACKLOG_ENABLED],
        completing_ahead_enabled=validated[const.DATA_HABIT_COMPLETING_AHEAD_ENABLED],
        backlog_window_days=validated[const.DATA_HABIT_BACKLOG_WINDOW_DAYS],
        vacations=vacations,
    )
    const.LOGGER.debug(
        "Built habit '%s' (%s, start=%s)",
        habit.name,
        type(habit.schedule).__name__,
        habit.routine_start_date,
    )
    return habit


def validate_habit_data(data: HabitData | dict[str, Any]) -> dict[str, str]:
    """Validate habit configuration without raising.

    Returns:
        Dict of errors: {field: error_key}. Empty dict means valid.
    """
    try:
        build_habit(data)
    except ConfigurationError as err:
        return {err.field: err.error_key}
    return {}


def _vacation_to_config(vacation: Vacation) -> VacationData:
    end_date = vacation.end_date.isoformat() if vacation.end_date else None
    return cast(
        "VacationData",
        {
            const.DATA_VACATION_START_DATE: vacation.start_date.isoformat(),
            const.DATA_VACATION_END_DATE: end_date,
        },
    )


def habit_to_config(habit: Habit) -> HabitData:
    """Serialize a Habit into persisted configuration."""
    return cast(
        "HabitData",
        {
            const.DATA_HABIT_NAME: habit.name,
            const.DATA_HABIT_SCHEDULE: schedule_to_config(habit.schedule),
            const.DATA_HABIT_ROUTINE_START_DATE: habit.routine_start_date.isoformat(),
            const.DATA_HABIT_REQUIRED_COMPLETIONS: habit.required_completions,
            const.DATA_HABIT_BACKLOG_ENABLED: habit.backlog_enabled,
            const.DATA_HABIT_COMPLETING_AHEAD_ENABLED: habit.completing_ahead_enabled,
            const.DATA_HABIT_BACKLOG_WINDOW_DAYS: habit.backlog_window_days,
            const.DATA_HABIT_VACATIONS: [
                _vacation_to_config(v) for v in habit.vacations
            ],
        },
    )
