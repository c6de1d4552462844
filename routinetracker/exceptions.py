"""Exceptions raised by the Routine Tracker core."""

from __future__ import annotations

from datetime import date


class RoutineTrackerError(Exception):
    """Base class for all Routine Tracker errors."""


class ConfigurationError(RoutineTrackerError):
    """Raised when a schedule, habit or vacation is constructed from invalid data.

    Attributes:
        field: The DATA_* key of the offending field
        error_key: The ERROR_* constant describing the failure
    """

    def __init__(self, field: str, error_key: str, detail: str | None = None) -> None:
        """Initialize ConfigurationError.

        Args:
            field: The DATA_* key of the field that failed validation
            error_key: The ERROR_* constant for the failure
            detail: Optional human-readable detail
        """
        self.field = field
        self.error_key = error_key
        message = f"{field}: {error_key}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidDateRangeError(RoutineTrackerError):
    """Raised when a date range query has its start after its end."""

    def __init__(self, start: date, end: date) -> None:
        """Initialize InvalidDateRangeError."""
        self.start = start
        self.end = end
        super().__init__(f"Invalid date range: {start} is after {end}")


class InvalidStateError(RoutineTrackerError):
    """Raised when status resolution receives contradictory inputs."""


class IllegalDateError(RoutineTrackerError):
    """Raised when a completion is recorded outside [routine start, today].

    Attributes:
        completion_date: The rejected date
        routine_start_date: The habit's start date
        today: The reference date at the time of the edit
    """

    def __init__(
        self, completion_date: date, routine_start_date: date, today: date
    ) -> None:
        """Initialize IllegalDateError."""
        self.completion_date = completion_date
        self.routine_start_date = routine_start_date
        self.today = today
        super().__init__(
            f"Cannot record completion on {completion_date}: "
            f"allowed range is {routine_start_date} to {today}"
        )
