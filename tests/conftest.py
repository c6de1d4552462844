"""Shared fixtures for Routine Tracker tests."""

from datetime import date

import pytest

from routinetracker.models import (
    EveryDaySchedule,
    Habit,
    WeeklySchedule,
)

# Monday
ROUTINE_START = date(2024, 1, 1)


@pytest.fixture
def routine_start() -> date:
    """Return the default routine start date (a Monday)."""
    return ROUTINE_START


@pytest.fixture
def daily_habit() -> Habit:
    """Every-day habit starting on the default routine start."""
    return Habit(
        name="Read",
        schedule=EveryDaySchedule(),
        routine_start_date=ROUTINE_START,
    )


@pytest.fixture
def weekday_habit() -> Habit:
    """Habit due Monday, Wednesday and Friday."""
    return Habit(
        name="Gym",
        schedule=WeeklySchedule(frozenset({0, 2, 4})),
        routine_start_date=ROUTINE_START,
    )
