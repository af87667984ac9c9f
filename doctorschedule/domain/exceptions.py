"""
Domain-specific exception hierarchy for the availability engine.
"""

from typing import Any


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class ValidationError(ScheduleError):
    """
    Raised when a window or break violates the schedule invariants.

    Validation errors are raised locally before any remote call is made.
    """

    reason = "invalid"


class InvalidWindowError(ValidationError):
    """Raised when a start time is not before its end time."""

    reason = "invalid_window"


class BreakOutsideWindowError(ValidationError):
    """Raised when a break does not fit inside the working window."""

    reason = "break_outside_window"


class BreakOverlapError(ValidationError):
    """Raised when a break overlaps another break of the same day."""

    reason = "break_overlap"


class TooManyBreaksError(ValidationError):
    """Raised when a day already holds the maximum number of breaks."""

    reason = "too_many_breaks"


class InvalidSlotDurationError(ValidationError):
    """Raised when a slot duration is not one of the supported values."""

    reason = "invalid_slot_duration"


class GatewayError(ScheduleError):
    """
    Raised when the remote availability API cannot be reached or rejects a call.

    Gateway errors are retryable; the caller keeps its draft state.
    """

    retryable = True

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class IllegalTransitionError(ScheduleError):
    """Raised when an edit session is driven through a transition it cannot take."""


class SaveInProgressError(ScheduleError):
    """Raised when a save is started for a target that is already being saved."""
