"""Status Engine - Pure logic for deriving per-date habit statuses.

This engine provides stateless, pure Python functions for:
- Single-date status resolution from precomputed facts (resolve_status)
- Batch resolution over a date range (resolve_range), which performs the
  non-local backlog and completed-ahead bookkeeping

ARCHITECTURE: Statuses are never stored. They are recomputed from completion
counts, vacations and the "today" reference on every call.

Batch resolution is a two-pass fold:
1. Walk forward from the routine start. Missed due dates enter a FIFO
   backlog; surplus completions on later dates sort out the earliest backlog
   entries, and whatever is left becomes completed-ahead credit that covers
   upcoming due dates.
2. Resolve each requested date with resolve_status(), feeding it the flags
   collected by the walk.

resolve_status() on its own is only exact when no later-date compensation
data exists; otherwise pass the flags computed by resolve_range().
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import math
from typing import TYPE_CHECKING

from .. import const
from ..exceptions import InvalidDateRangeError, InvalidStateError
from ..models import HistoricalStatus, PlanningStatus
from ..utils.dt_utils import days_between, iter_dates
from .schedule_engine import ScheduleEngine

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date

    from ..models import Habit, HabitStatus, Vacation


# =============================================================================
# FOLD RESULT
# =============================================================================


@dataclass(slots=True)
class DateFacts:
    """Everything resolve_status() needs for one date.

    Attributes:
        is_due: Schedule says an occurrence is expected
        num_of_times_completed: Recorded count for the date
        vacation: Vacation covering the date, if any
        sorted_out: A later completion made up for this missed date
        sorts_out_backlog: This date's completions made up for an earlier miss
        completed_ahead: Surplus from an earlier date covers this due date
        has_backlog: Outstanding backlog is planned onto this date
    """

    is_due: bool
    num_of_times_completed: float = 0.0
    vacation: Vacation | None = None
    sorted_out: bool = False
    sorts_out_backlog: bool = False
    completed_ahead: bool = False
    has_backlog: bool = False


# =============================================================================
# STATUS ENGINE
# =============================================================================


class StatusEngine:
    """Pure logic engine for habit status resolution.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_planning_date(
        validation_date: date, today: date, num_of_times_completed: float
    ) -> bool:
        """Return True if the date is not resolved yet.

        Future dates are unresolved. Today stays unresolved until something
        is recorded for it, because the day is not over.
        """
        if validation_date > today:
            return True
        return validation_date == today and num_of_times_completed == 0

    # =========================================================================
    # SINGLE-DATE RESOLUTION
    # =========================================================================

    @staticmethod
    def resolve_status(
        validation_date: date,
        today: date,
        *,
        is_due: bool,
        num_of_times_completed: float = 0.0,
        required_completions: int = const.DEFAULT_REQUIRED_COMPLETIONS,
        on_vacation: bool = False,
        vacation: Vacation | None = None,
        future_completion_exists: bool = False,
        sorts_out_backlog: bool = False,
        completed_ahead: bool = False,
        has_backlog: bool = False,
    ) -> HabitStatus:
        """Derive the status of one date.

        Args:
            validation_date: The date being resolved
            today: Reference date separating history from planning
            is_due: Precomputed due-ness (see ScheduleEngine.is_due)
            num_of_times_completed: Recorded completions on the date
            required_completions: Completions that make a due date complete
            on_vacation: The date falls in a vacation
            vacation: The vacation record covering the date
            future_completion_exists: A later completion sorted out this date
            sorts_out_backlog: This date's completion sorted out an earlier miss
            completed_ahead: Earlier surplus covers this due date
            has_backlog: Outstanding backlog is planned onto this date

        Returns:
            One PlanningStatus or HistoricalStatus member

        Raises:
            InvalidStateError: required_completions <= 0, a negative count,
                or on_vacation without a vacation covering the date
        """
        if required_completions <= 0:
            raise InvalidStateError(
                f"required_completions must be positive, got {required_completions}"
            )
        if num_of_times_completed < 0:
            raise InvalidStateError(
                "num_of_times_completed must not be negative, "
                f"got {num_of_times_completed}"
            )
        if on_vacation and (vacation is None or validation_date not in vacation):
            raise InvalidStateError(f"{validation_date} is not covered by a vacation")

        completed = num_of_times_completed > 0

        # === PLANNING ===
        if StatusEngine.is_planning_date(
            validation_date, today, num_of_times_completed
        ):
            if on_vacation:
                return PlanningStatus.ON_VACATION
            if completed or completed_ahead:
                return PlanningStatus.ALREADY_COMPLETED
            if not is_due:
                return PlanningStatus.NOT_DUE
            if has_backlog:
                return PlanningStatus.BACKLOG
            return PlanningStatus.PLANNED

        # === HISTORICAL: VACATION ===
        if on_vacation:
            if completed and num_of_times_completed >= required_completions:
                return HistoricalStatus.OVER_COMPLETED_ON_VACATION
            if future_completion_exists:
                return HistoricalStatus.SORTED_OUT_BACKLOG_ON_VACATION
            return HistoricalStatus.NOT_COMPLETED_ON_VACATION

        # === HISTORICAL ===
        if completed and sorts_out_backlog:
            return HistoricalStatus.COMPLETED_LATER

        if not is_due:
            # Nothing is required on a not-due date, so any count is extra
            if completed:
                return HistoricalStatus.OVER_COMPLETED
            return HistoricalStatus.SKIPPED

        if not completed:
            if future_completion_exists:
                return HistoricalStatus.SORTED_OUT_BACKLOG
            if completed_ahead:
                return HistoricalStatus.ALREADY_COMPLETED
            return HistoricalStatus.NOT_COMPLETED

        if num_of_times_completed > required_completions:
            return HistoricalStatus.OVER_COMPLETED

        # Partial counts are accepted as completed
        return HistoricalStatus.COMPLETED

    # =========================================================================
    # BATCH RESOLUTION
    # =========================================================================

    @staticmethod
    def resolve_range(
        habit: Habit,
        completions: Mapping[date, float],
        start: date,
        end: date,
        today: date,
    ) -> dict[date, HabitStatus]:
        """Resolve every date in [start, end] for a habit.

        Args:
            habit: Habit configuration (schedule, start date, policies)
            completions: Completion count per date (missing dates = 0)
            start: Range start (inclusive)
            end: Range end (inclusive)
            today: Reference date

        Returns:
            Ordered dict of date -> status. Dates before the routine start
            resolve to PlanningStatus.NOT_DUE.
            Statuses do not depend on the range: completions up to today
            are always folded in, even past end.

        Raises:
            InvalidDateRangeError: start is after end
        """
        if start > end:
            raise InvalidDateRangeError(start, end)

        # Later completions up to today can sort out dates inside the range
        horizon = max(end, today)
        facts = StatusEngine.collect_facts(habit, completions, horizon, today)

        statuses: dict[date, HabitStatus] = {}
        for validation_date in iter_dates(start, end):
            date_facts = facts.get(validation_date)
            if date_facts is None:
                # Before the routine start: out of scope, never due
                statuses[validation_date] = PlanningStatus.NOT_DUE
                continue
            statuses[validation_date] = StatusEngine.resolve_status(
                validation_date,
                today,
                is_due=date_facts.is_due,
                num_of_times_completed=date_facts.num_of_times_completed,
                required_completions=habit.required_completions,
                on_vacation=date_facts.vacation is not None,
                vacation=date_facts.vacation,
                future_completion_exists=date_facts.sorted_out,
                sorts_out_backlog=date_facts.sorts_out_backlog,
                completed_ahead=date_facts.completed_ahead,
                has_backlog=date_facts.has_backlog,
            )
        return statuses

    @staticmethod
    def collect_facts(
        habit: Habit,
        completions: Mapping[date, float],
        end: date,
        today: date,
    ) -> dict[date, DateFacts]:
        """Forward pass: gather per-date facts from the routine start to end.

        Backlog entries are matched first-in first-out. Entries older than
        habit.backlog_window_days (relative to the date doing the sorting
        out, or to today when planning) are dropped and stay missed.
        """
        required = habit.required_completions
        window = habit.backlog_window_days
        backlog: deque[date] = deque()
        credit = 0
        # Backlog still open at today, planned onto upcoming due dates
        outstanding: int | None = None

        facts: dict[date, DateFacts] = {}
        for current in iter_dates(habit.routine_start_date, end):
            count = completions.get(current, 0.0)
            if count < 0:
                raise InvalidStateError(f"Negative completion count on {current}")
            date_facts = DateFacts(
                is_due=ScheduleEngine.is_due(
                    current, habit.routine_start_date, habit.schedule
                ),
                num_of_times_completed=count,
                vacation=habit.vacation_on(current),
            )
            facts[current] = date_facts

            if StatusEngine.is_planning_date(current, today, count):
                if outstanding is None:
                    StatusEngine._expire_backlog(backlog, today, window)
                    outstanding = len(backlog)
                if (
                    not date_facts.is_due
                    or date_facts.vacation is not None
                    or count > 0
                ):
                    continue
                if credit > 0 and habit.completing_ahead_enabled:
                    credit -= 1
                    date_facts.completed_ahead = True
                elif outstanding > 0:
                    outstanding -= 1
                    date_facts.has_backlog = True
                continue

            StatusEngine._expire_backlog(backlog, current, window)
            on_vacation = date_facts.vacation is not None
            need = required if date_facts.is_due else 0

            if date_facts.is_due and count == 0 and not on_vacation:
                if credit > 0 and habit.completing_ahead_enabled:
                    credit -= 1
                    date_facts.completed_ahead = True
                elif habit.backlog_enabled:
                    backlog.append(current)
                continue

            if date_facts.is_due and on_vacation and count < required:
                if habit.backlog_enabled:
                    backlog.append(current)
                continue

            surplus = count - need
            if surplus <= 0:
                continue

            occurrences = math.ceil(surplus / required)
            while occurrences > 0 and backlog:
                facts[backlog.popleft()].sorted_out = True
                date_facts.sorts_out_backlog = True
                occurrences -= 1
            if habit.completing_ahead_enabled:
                credit += occurrences

        const.LOGGER.debug(
            "StatusEngine: Folded %d dates for '%s' (open backlog=%d, credit=%d)",
            len(facts),
            habit.name,
            len(backlog),
            credit,
        )
        return facts

    @staticmethod
    def _expire_backlog(
        backlog: deque[date], reference: date, window: int | None
    ) -> None:
        """Drop backlog entries that fell out of the trailing window."""
        if window is None:
            return
        while backlog and days_between(backlog[0], reference) > window:
            backlog.popleft()
