"""Engine modules for Routine Tracker.

Contains specialized computation engines:
- schedule_engine: Due-ness predicate, due-date enumeration, period windows
- status_engine: Per-date status resolution with backlog bookkeeping
- streak_engine: Streak detection and queries
"""

# Use relative imports within package to avoid mypy module resolution issues
from .schedule_engine import ScheduleEngine
from .status_engine import DateFacts, StatusEngine
from .streak_engine import COUNTED_STATUSES, TOLERATED_STATUSES, StreakEngine

__all__ = [
    "COUNTED_STATUSES",
    "TOLERATED_STATUSES",
    "DateFacts",
    "ScheduleEngine",
    "StatusEngine",
    "StreakEngine",
]
