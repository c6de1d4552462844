"""Streak Engine - Pure logic for detecting streaks in a status sequence.

Streak rules:
- Counted statuses (completions, made-up misses, completed-ahead dates)
  start or extend a streak.
- Tolerated statuses (skipped, vacation) extend a streak in progress but
  never start one.
- Every other status breaks the streak, and so does a gap in the dates.

Streaks are computed on demand and never stored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import TYPE_CHECKING, Final

from ..models import HistoricalStatus, PlanningStatus, Streak

if TYPE_CHECKING:
    from ..models import HabitStatus


COUNTED_STATUSES: Final[frozenset[HabitStatus]] = frozenset(
    {
        HistoricalStatus.COMPLETED,
        HistoricalStatus.OVER_COMPLETED,
        HistoricalStatus.OVER_COMPLETED_ON_VACATION,
        HistoricalStatus.SORTED_OUT_BACKLOG,
        HistoricalStatus.SORTED_OUT_BACKLOG_ON_VACATION,
        HistoricalStatus.COMPLETED_LATER,
        HistoricalStatus.ALREADY_COMPLETED,
        PlanningStatus.ALREADY_COMPLETED,
    }
)

TOLERATED_STATUSES: Final[frozenset[HabitStatus]] = frozenset(
    {
        HistoricalStatus.SKIPPED,
        HistoricalStatus.NOT_COMPLETED_ON_VACATION,
        PlanningStatus.ON_VACATION,
    }
)


class StreakEngine:
    """Pure logic engine for streak detection and queries.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_streak_breaking(status: HabitStatus) -> bool:
        """Return True if the status ends a streak in progress."""
        return status not in COUNTED_STATUSES and status not in TOLERATED_STATUSES

    @staticmethod
    def detect_all(
        statuses: Mapping[date, HabitStatus] | Iterable[tuple[date, HabitStatus]],
    ) -> list[Streak]:
        """Partition a status sequence into maximal streaks.

        Args:
            statuses: date -> status mapping, or (date, status) pairs in any
                order

        Returns:
            Streaks ordered by start date. Adjacent streaks are always
            separated by a breaking date or a gap.
        """
        pairs = statuses.items() if isinstance(statuses, Mapping) else statuses

        streaks: list[Streak] = []
        # (start, end) of the streak in progress
        run: tuple[date, date] | None = None

        for current, status in sorted(pairs, key=lambda pair: pair[0]):
            if run is not None and current != run[1] + timedelta(days=1):
                streaks.append(Streak(*run))
                run = None

            if status in COUNTED_STATUSES:
                run = (run[0] if run else current, current)
            elif status in TOLERATED_STATUSES and run is not None:
                run = (run[0], current)
            elif run is not None:
                streaks.append(Streak(*run))
                run = None

        if run is not None:
            streaks.append(Streak(*run))

        return streaks

    @staticmethod
    def contains(streak: Streak, validation_date: date) -> bool:
        """Return True if the date lies within the streak (inclusive)."""
        return streak.start_date <= validation_date <= streak.end_date

    @staticmethod
    def get_duration_in_days(streak: Streak) -> int:
        """Return the number of dates in the streak."""
        return (streak.end_date - streak.start_date).days + 1

    @staticmethod
    def get_current_streak(streaks: Iterable[Streak], today: date) -> Streak | None:
        """Return the streak still in progress at today.

        A streak is current if it covers today, or if it ended yesterday:
        today is not over yet, so its open status does not break anything.
        """
        yesterday = today - timedelta(days=1)
        for streak in streaks:
            if StreakEngine.contains(streak, today) or streak.end_date == yesterday:
                return streak
        return None

    @staticmethod
    def get_longest_streak(streaks: Iterable[Streak]) -> Streak | None:
        """Return the longest streak; ties go to the earliest start date."""
        longest: Streak | None = None
        for streak in sorted(streaks, key=lambda s: s.start_date):
            if longest is None or StreakEngine.get_duration_in_days(
                streak
            ) > StreakEngine.get_duration_in_days(longest):
                longest = streak
        return longest
