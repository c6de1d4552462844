# File: __init__.py
"""Routine Tracker core.

Determines when a habit is due, what status each calendar date has given the
recorded completions, and which runs of dates form streaks.

Key Features:
- Six schedule kinds (every day, weekly, monthly, periodic, custom dates,
  annual).
- Status resolution with backlog, completing ahead and vacations.
- Streak detection and calendar month data.
"""

from __future__ import annotations

from .data_builders import build_habit, build_schedule, habit_to_config
from .engines import ScheduleEngine, StatusEngine, StreakEngine
from .exceptions import (
    ConfigurationError,
    IllegalDateError,
    InvalidDateRangeError,
    InvalidStateError,
    RoutineTrackerError,
)
from .habit_manager import HabitManager
from .models import (
    AnnualDate,
    AnnualSchedule,
    CalendarDateData,
    CompletionRecord,
    CustomDateSchedule,
    EveryDaySchedule,
    Habit,
    HistoricalStatus,
    MonthlySchedule,
    PeriodicCustomSchedule,
    PlanningStatus,
    Streak,
    Vacation,
    WeekDayMonthRelated,
    WeeklySchedule,
)

__all__ = [
    "AnnualDate",
    "AnnualSchedule",
    "CalendarDateData",
    "CompletionRecord",
    "ConfigurationError",
    "CustomDateSchedule",
    "EveryDaySchedule",
    "Habit",
    "HabitManager",
    "HistoricalStatus",
    "IllegalDateError",
    "InvalidDateRangeError",
    "InvalidStateError",
    "MonthlySchedule",
    "PeriodicCustomSchedule",
    "PlanningStatus",
    "RoutineTrackerError",
    "ScheduleEngine",
    "StatusEngine",
    "Streak",
    "StreakEngine",
    "Vacation",
    "WeekDayMonthRelated",
    "WeeklySchedule",
    "build_habit",
    "build_schedule",
    "habit_to_config",
]
