"""Habit Manager - Completion history, calendar data and streak summary.

Wires the engines together for one habit:
- ScheduleEngine answers due-ness
- StatusEngine folds completion history into per-date statuses
- StreakEngine partitions statuses into streaks

Calendar months are cached by their date range. Any completion edit can
change statuses on both sides of the edited date (backlog made up later,
credit spent earlier), so edits drop the whole cache.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from . import const
from .engines import StatusEngine, StreakEngine
from .exceptions import IllegalDateError, InvalidDateRangeError
from .models import CalendarDateData
from .utils.dt_utils import dt_today, month_range, shift_month

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .models import CompletionRecord, Habit, HabitStatus, Streak


class HabitManager:
    """Stateful facade over the pure engines for a single habit.

    Not thread-safe; one instance per habit and caller.
    """

    def __init__(
        self,
        habit: Habit,
        completions: Iterable[CompletionRecord] | None = None,
        today: date | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            habit: Habit configuration
            completions: Previously persisted completion records. Later
                records for the same date replace earlier ones.
            today: Reference date (defaults to the current calendar day)
        """
        self.habit = habit
        self._today = today or dt_today()
        self._completions: dict[date, float] = {}
        for record in completions or ():
            self._store(record)

        # (month start, month end) -> date -> CalendarDateData
        self._calendar_cache: dict[tuple[date, date], dict[date, CalendarDateData]] = {}
        self._streaks: list[Streak] | None = None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def today(self) -> date:
        """Reference date separating history from planning."""
        return self._today

    @property
    def current_streak_duration(self) -> int:
        """Days in the streak still in progress (0 when there is none)."""
        streak = StreakEngine.get_current_streak(self.get_streaks(), self._today)
        return StreakEngine.get_duration_in_days(streak) if streak else 0

    @property
    def longest_streak_duration(self) -> int:
        """Days in the longest streak so far (0 when there is none)."""
        streak = StreakEngine.get_longest_streak(self.get_streaks())
        return StreakEngine.get_duration_in_days(streak) if streak else 0

    # =========================================================================
    # COMPLETION HISTORY
    # =========================================================================

    def _store(self, record: CompletionRecord) -> None:
        if record.num_of_times_completed == 0:
            self._completions.pop(record.date, None)
        else:
            self._completions[record.date] = record.num_of_times_completed

    def insert_completion(self, record: CompletionRecord) -> None:
        """Record the completion count for a date, replacing any previous one.

        Raises:
            IllegalDateError: The date is before the routine start or after
                today
        """
        if not self.habit.routine_start_date <= record.date <= self._today:
            const.LOGGER.debug(
                "HabitManager: Rejected completion for '%s' on %s",
                self.habit.name,
                record.date,
            )
            raise IllegalDateError(
                record.date, self.habit.routine_start_date, self._today
            )

        self._store(record)
        self.invalidate()

    def get_num_of_times_completed(self, validation_date: date) -> float:
        """Return the recorded count for a date (0 when nothing recorded)."""
        return self._completions.get(validation_date, 0.0)

    # =========================================================================
    # STATUSES & STREAKS
    # =========================================================================

    def get_statuses(self, start: date, end: date) -> dict[date, HabitStatus]:
        """Resolve every date in [start, end].

        Raises:
            InvalidDateRangeError: start is after end
        """
        return StatusEngine.resolve_range(
            self.habit, self._completions, start, end, self._today
        )

    def get_streaks(self) -> list[Streak]:
        """Return every streak from the routine start up to today."""
        if self._streaks is None:
            if self._today < self.habit.routine_start_date:
                self._streaks = []
            else:
                statuses = self.get_statuses(
                    self.habit.routine_start_date, self._today
                )
                self._streaks = StreakEngine.detect_all(statuses)
        return self._streaks

    # =========================================================================
    # CALENDAR
    # =========================================================================

    def get_calendar_month(self, year: int, month: int) -> dict[date, CalendarDateData]:
        """Return calendar data for every date of a month.

        Results are cached until the next edit or invalidate() call.
        """
        key = month_range(year, month)
        cached = self._calendar_cache.get(key)
        if cached is not None:
            const.LOGGER.debug("HabitManager: Calendar cache hit for %s..%s", *key)
            return cached

        const.LOGGER.debug("HabitManager: Calendar cache miss for %s..%s", *key)
        streaks = self.get_streaks()
        calendar_data = {
            validation_date: CalendarDateData(
                status=status,
                included_in_streak=any(
                    StreakEngine.contains(streak, validation_date) for streak in streaks
                ),
                num_of_times_completed=self.get_num_of_times_completed(validation_date),
            )
            for validation_date, status in self.get_statuses(*key).items()
        }
        self._calendar_cache[key] = calendar_data
        return calendar_data

    def load_months_around(
        self,
        year: int,
        month: int,
        margin: int = const.NUM_OF_MONTHS_TO_LOAD_AHEAD,
    ) -> dict[tuple[int, int], dict[date, CalendarDateData]]:
        """Load the month plus `margin` months on each side into the cache.

        Returns:
            (year, month) -> calendar data, in chronological order
        """
        if margin < 0:
            raise ValueError(f"margin must not be negative, got {margin}")
        loaded: dict[tuple[int, int], dict[date, CalendarDateData]] = {}
        for offset in range(-margin, margin + 1):
            shifted = shift_month(year, month, offset)
            loaded[shifted] = self.get_calendar_month(*shifted)
        return loaded

    def invalidate(self, start: date | None = None, end: date | None = None) -> None:
        """Drop cached calendar windows overlapping [start, end].

        Without arguments every cached window is dropped. Streaks are always
        recomputed.

        Raises:
            InvalidDateRangeError: start is after end
        """
        self._streaks = None
        if start is None and end is None:
            self._calendar_cache.clear()
            return

        low = start or date.min
        high = end or date.max
        if low > high:
            raise InvalidDateRangeError(low, high)
        for key in [
            key for key in self._calendar_cache if key[0] <= high and key[1] >= low
        ]:
            del self._calendar_cache[key]

    def set_today(self, today: date) -> None:
        """Move the reference date and drop everything derived from it."""
        if today == self._today:
            return
        const.LOGGER.debug(
            "HabitManager: Moving today for '%s' from %s to %s",
            self.habit.name,
            self._today,
            today,
        )
        self._today = today
        self.invalidate()
