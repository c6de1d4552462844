"""Tests for data_builders.py configuration building and validation.

Covers schema coercion (ISO strings, numeric strings), business-rule
errors raised by the models, error maps from validate_*_data() and the
persisted shape produced by the *_to_config() serializers.
"""

from __future__ import annotations

from datetime import date

import pytest

from routinetracker import const
from routinetracker.data_builders import (
    build_habit,
    build_schedule,
    habit_to_config,
    schedule_to_config,
    validate_habit_data,
    validate_schedule_data,
)
from routinetracker.exceptions import ConfigurationError
from routinetracker.models import (
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

# =============================================================================
# TEST: SCHEDULES
# =============================================================================


class TestBuildSchedule:
    """Building each schedule kind from persisted configuration."""

    def test_every_day(self) -> None:
        """Type key only."""
        assert build_schedule({"type": "every_day"}) == EveryDaySchedule()

    def test_weekly_coerces_strings(self) -> None:
        """Numeric strings become weekday integers."""
        schedule = build_schedule({"type": "weekly", "due_days_of_week": ["0", 2, "6"]})
        assert schedule == WeeklySchedule(frozenset({0, 2, 6}))

    def test_monthly_defaults(self) -> None:
        """Optional monthly keys get defaults."""
        schedule = build_schedule({"type": "monthly", "due_dates_indices": [1, 15]})
        assert schedule == MonthlySchedule(due_dates_indices=frozenset({1, 15}))
        assert schedule.start_from_routine_start is True

    def test_monthly_weekday_rules(self) -> None:
        """Nested weekday rules become WeekDayMonthRelated values."""
        schedule = build_schedule(
            {
                "type": "monthly",
                "include_last_day_of_month": "yes",
                "weekdays_month_related": [
                    {"day_of_week": 6, "ordinal": "last"},
                    {"day_of_week": "0", "ordinal": "first"},
                ],
                "start_from_routine_start": False,
            }
        )
        assert isinstance(schedule, MonthlySchedule)
        assert schedule.include_last_day_of_month is True
        assert schedule.start_from_routine_start is False
        assert schedule.weekdays_month_related == {
            WeekDayMonthRelated(6, "last"),
            WeekDayMonthRelated(0, "first"),
        }

    def test_periodic(self) -> None:
        """Period length and offsets."""
        schedule = build_schedule(
            {
                "type": "periodic_custom",
                "num_of_days_in_period": "7",
                "due_dates_indices": [1, 4],
            }
        )
        assert schedule == PeriodicCustomSchedule(7, frozenset({1, 4}))

    def test_custom_dates_from_iso(self) -> None:
        """ISO strings and date objects are both accepted."""
        schedule = build_schedule(
            {"type": "custom_date", "due_dates": ["2024-02-29", date(2024, 3, 1)]}
        )
        assert schedule == CustomDateSchedule(
            frozenset({date(2024, 2, 29), date(2024, 3, 1)})
        )

    def test_annual_with_start_day(self) -> None:
        """Annual dates and start of year."""
        schedule = build_schedule(
            {
                "type": "annual",
                "due_dates": [{"month": 2, "day_of_month": 29}],
                "start_day_of_year": {"month": 5, "day_of_month": 25},
            }
        )
        assert schedule == AnnualSchedule(
            frozenset({AnnualDate(2, 29)}), AnnualDate(5, 25)
        )

    def test_annual_default_start_day(self) -> None:
        """Start of year defaults to January 1."""
        schedule = build_schedule(
            {"type": "annual", "due_dates": [{"month": 12, "day_of_month": 25}]}
        )
        assert isinstance(schedule, AnnualSchedule)
        assert schedule.start_day_of_year == AnnualDate(1, 1)


class TestScheduleErrors:
    """Structural and business-rule failures."""

    @pytest.mark.parametrize("data", [{"type": "hourly"}, {}, {"type": None}])
    def test_unknown_type(self, data: dict) -> None:
        """Unknown or missing type."""
        with pytest.raises(ConfigurationError) as err:
            build_schedule(data)
        assert err.value.field == const.DATA_SCHEDULE_TYPE
        assert err.value.error_key == const.ERROR_INVALID_SCHEDULE_TYPE

    def test_missing_required_key(self) -> None:
        """Weekly needs its weekday list."""
        with pytest.raises(ConfigurationError) as err:
            build_schedule({"type": "weekly"})
        assert err.value.field == const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK
        assert err.value.error_key == const.ERROR_INVALID_VALUE

    def test_bad_nested_date(self) -> None:
        """An unparseable custom date reports the list field."""
        with pytest.raises(ConfigurationError) as err:
            build_schedule({"type": "custom_date", "due_dates": ["2024-13-01"]})
        assert err.value.field == const.DATA_SCHEDULE_DUE_DATES

    def test_string_is_not_a_list(self) -> None:
        """A bare string is rejected instead of split into characters."""
        with pytest.raises(ConfigurationError):
            build_schedule({"type": "weekly", "due_days_of_week": "0"})

    @pytest.mark.parametrize(
        ("data", "field", "error_key"),
        [
            (
                {"type": "weekly", "due_days_of_week": []},
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK,
                const.ERROR_EMPTY_DUE_SET,
            ),
            (
                {"type": "weekly", "due_days_of_week": [7]},
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK,
                const.ERROR_INVALID_WEEKDAY,
            ),
            (
                {"type": "monthly"},
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_EMPTY_DUE_SET,
            ),
            (
                {"type": "monthly", "due_dates_indices": [32]},
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_INVALID_DAY_INDEX,
            ),
            (
                {
                    "type": "monthly",
                    "weekdays_month_related": [{"day_of_week": 1, "ordinal": "sixth"}],
                },
                const.DATA_ORDINAL,
                const.ERROR_INVALID_ORDINAL,
            ),
            (
                {
                    "type": "periodic_custom",
                    "num_of_days_in_period": 0,
                    "due_dates_indices": [1],
                },
                const.DATA_SCHEDULE_NUM_OF_DAYS_IN_PERIOD,
                const.ERROR_INVALID_PERIOD,
            ),
            (
                {
                    "type": "periodic_custom",
                    "num_of_days_in_period": 7,
                    "due_dates_indices": [],
                },
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_EMPTY_DUE_SET,
            ),
            (
                {
                    "type": "periodic_custom",
                    "num_of_days_in_period": 7,
                    "due_dates_indices": [8],
                },
                const.DATA_SCHEDULE_DUE_DATES_INDICES,
                const.ERROR_INVALID_DAY_INDEX,
            ),
            (
                {"type": "custom_date", "due_dates": []},
                const.DATA_SCHEDULE_DUE_DATES,
                const.ERROR_EMPTY_DUE_SET,
            ),
            (
                {"type": "annual", "due_dates": []},
                const.DATA_SCHEDULE_DUE_DATES,
                const.ERROR_EMPTY_DUE_SET,
            ),
            (
                {"type": "annual", "due_dates": [{"month": 2, "day_of_month": 30}]},
                const.DATA_DAY_OF_MONTH,
                const.ERROR_INVALID_ANNUAL_DATE,
            ),
            (
                {"type": "annual", "due_dates": [{"month": 13, "day_of_month": 1}]},
                const.DATA_MONTH,
                const.ERROR_INVALID_ANNUAL_DATE,
            ),
        ],
    )
    def test_business_rules(self, data: dict, field: str, error_key: str) -> None:
        """Model validation reports the offending field."""
        assert validate_schedule_data(data) == {field: error_key}

    def test_valid_schedule_has_no_errors(self) -> None:
        """Empty error map for valid input."""
        assert validate_schedule_data({"type": "every_day"}) == {}


class TestScheduleToConfig:
    """Persisted shape of schedules."""

    def test_sets_written_sorted(self) -> None:
        """Sets become sorted lists."""
        config = schedule_to_config(WeeklySchedule(frozenset({6, 0, 3})))
        assert config == {"type": "weekly", "due_days_of_week": [0, 3, 6]}

    def test_custom_dates_written_iso(self) -> None:
        """Dates become ISO strings."""
        config = schedule_to_config(
            CustomDateSchedule(frozenset({date(2024, 3, 1), date(2024, 2, 29)}))
        )
        assert config["due_dates"] == ["2024-02-29", "2024-03-01"]

    def test_monthly_config_rebuilds(self) -> None:
        """The persisted monthly shape builds back into the same schedule."""
        schedule = MonthlySchedule(
            due_dates_indices=frozenset({31, 1}),
            include_last_day_of_month=True,
            weekdays_month_related=frozenset(
                {WeekDayMonthRelated(6, "last"), WeekDayMonthRelated(0, "first")}
            ),
            start_from_routine_start=False,
        )
        config = schedule_to_config(schedule)
        assert config["weekdays_month_related"] == [
            {"day_of_week": 0, "ordinal": "first"},
            {"day_of_week": 6, "ordinal": "last"},
        ]
        assert build_schedule(config) == schedule


# =============================================================================
# TEST: HABITS
# =============================================================================


def _habit_data(**overrides) -> dict:
    data = {
        "name": "Stretch",
        "schedule": {"type": "weekly", "due_days_of_week": [0, 2, 4]},
        "routine_start_date": "2024-01-01",
    }
    data.update(overrides)
    return data


class TestBuildHabit:
    """Habit configuration."""

    def test_defaults(self) -> None:
        """Policy fields fall back to the package defaults."""
        habit = build_habit(_habit_data())
        assert habit.name == "Stretch"
        assert habit.routine_start_date == date(2024, 1, 1)
        assert habit.required_completions == const.DEFAULT_REQUIRED_COMPLETIONS
        assert habit.backlog_enabled is const.DEFAULT_BACKLOG_ENABLED
        assert habit.completing_ahead_enabled is const.DEFAULT_COMPLETING_AHEAD_ENABLED
        assert habit.backlog_window_days is None
        assert habit.vacations == ()

    def test_name_is_stripped(self) -> None:
        """Surrounding whitespace is dropped."""
        assert build_habit(_habit_data(name="  Stretch ")).name == "Stretch"

    def test_vacations(self) -> None:
        """Closed and open-ended vacations."""
        habit = build_habit(
            _habit_data(
                vacations=[
                    {"start_date": "2024-02-01", "end_date": "2024-02-10"},
                    {"start_date": "2024-06-01"},
                ]
            )
        )
        assert habit.vacations == (
            Vacation(date(2024, 2, 1), date(2024, 2, 10)),
            Vacation(date(2024, 6, 1)),
        )
        assert habit.vacation_on(date(2030, 1, 1)) == Vacation(date(2024, 6, 1))
        assert habit.vacation_on(date(2024, 3, 1)) is None

    def test_policies(self) -> None:
        """Explicit policy values are kept."""
        habit = build_habit(
            _habit_data(
                required_completions="3",
                backlog_enabled=False,
                completing_ahead_enabled="off",
                backlog_window_days=14,
            )
        )
        assert habit.required_completions == 3
        assert habit.backlog_enabled is False
        assert habit.completing_ahead_enabled is False
        assert habit.backlog_window_days == 14

    def test_config_uses_data_keys(self) -> None:
        """Serialized keys are the DATA_* keys the builders read."""
        habit = Habit(
            name="Stretch",
            schedule=MonthlySchedule(due_dates_indices=frozenset({1})),
            routine_start_date=date(2024, 1, 1),
            vacations=(Vacation(date(2024, 3, 1)),),
        )
        config = habit_to_config(habit)
        assert set(config) == {
            const.DATA_HABIT_NAME,
            const.DATA_HABIT_SCHEDULE,
            const.DATA_HABIT_ROUTINE_START_DATE,
            const.DATA_HABIT_REQUIRED_COMPLETIONS,
            const.DATA_HABIT_BACKLOG_ENABLED,
            const.DATA_HABIT_COMPLETING_AHEAD_ENABLED,
            const.DATA_HABIT_BACKLOG_WINDOW_DAYS,
            const.DATA_HABIT_VACATIONS,
        }
        assert set(config[const.DATA_HABIT_SCHEDULE]) == {
            const.DATA_SCHEDULE_TYPE,
            const.DATA_SCHEDULE_DUE_DATES_INDICES,
            const.DATA_SCHEDULE_INCLUDE_LAST_DAY_OF_MONTH,
            const.DATA_SCHEDULE_WEEKDAYS_MONTH_RELATED,
            const.DATA_SCHEDULE_START_FROM_ROUTINE_START,
        }
        assert config[const.DATA_HABIT_VACATIONS] == [
            {
                const.DATA_VACATION_START_DATE: "2024-03-01",
                const.DATA_VACATION_END_DATE: None,
            }
        ]

    def test_config_rebuilds_same_habit(self) -> None:
        """habit_to_config output builds back into an equal habit."""
        habit = Habit(
            name="Run",
            schedule=AnnualSchedule(frozenset({AnnualDate(4, 1)})),
            routine_start_date=date(2024, 1, 1),
            required_completions=2,
            backlog_window_days=7,
            vacations=(Vacation(date(2024, 8, 1), date(2024, 8, 14)),),
        )
        config = habit_to_config(habit)
        assert config["routine_start_date"] == "2024-01-01"
        assert config["vacations"] == [
            {"start_date": "2024-08-01", "end_date": "2024-08-14"}
        ]
        assert build_habit(config) == habit


class TestHabitErrors:
    """Habit validation failures."""

    @pytest.mark.parametrize(
        ("overrides", "field", "error_key"),
        [
            ({"name": "   "}, const.DATA_HABIT_NAME, const.ERROR_INVALID_NAME),
            ({"name": 42}, const.DATA_HABIT_NAME, const.ERROR_INVALID_VALUE),
            (
                {"routine_start_date": "yesterday"},
                const.DATA_HABIT_ROUTINE_START_DATE,
                const.ERROR_INVALID_VALUE,
            ),
            (
                {"required_completions": 0},
                const.DATA_HABIT_REQUIRED_COMPLETIONS,
                const.ERROR_INVALID_REQUIRED_COMPLETIONS,
            ),
            (
                {"backlog_window_days": 0},
                const.DATA_HABIT_BACKLOG_WINDOW_DAYS,
                const.ERROR_INVALID_BACKLOG_WINDOW,
            ),
            (
                {
                    "vacations": [
                        {"start_date": "2024-02-10", "end_date": "2024-02-01"}
                    ]
                },
                const.DATA_VACATION_END_DATE,
                const.ERROR_INVALID_VACATION,
            ),
            (
                {"vacations": [{"end_date": "2024-02-01"}]},
                const.DATA_HABIT_VACATIONS,
                const.ERROR_INVALID_VALUE,
            ),
            (
                {"schedule": {"type": "weekly", "due_days_of_week": []}},
                const.DATA_SCHEDULE_DUE_DAYS_OF_WEEK,
                const.ERROR_EMPTY_DUE_SET,
            ),
        ],
    )
    def test_errors(self, overrides: dict, field: str, error_key: str) -> None:
        """Each failure maps to its field."""
        assert validate_habit_data(_habit_data(**overrides)) == {field: error_key}

    def test_blank_name_rejected_by_model(self) -> None:
        """Habit itself refuses a whitespace-only name."""
        with pytest.raises(ConfigurationError) as err:
            Habit(
                name="\t ",
                schedule=EveryDaySchedule(),
                routine_start_date=date(2024, 1, 1),
            )
        assert err.value.field == const.DATA_HABIT_NAME
        assert err.value.error_key == const.ERROR_INVALID_NAME

    def test_missing_schedule(self) -> None:
        """The schedule is required."""
        data = _habit_data()
        del data["schedule"]
        with pytest.raises(ConfigurationError) as err:
            build_habit(data)
        assert err.value.field == const.DATA_HABIT_SCHEDULE

    def test_valid_habit_has_no_errors(self) -> None:
        """Empty error map for valid input."""
        assert validate_habit_data(_habit_data()) == {}
