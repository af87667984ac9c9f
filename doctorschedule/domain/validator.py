"""
Pure validation of working windows and break intervals.

Downstream slot generation assumes every day is a flat list of disjoint free
sub-intervals, so breaks must nest inside the window and must not overlap.
"""

from datetime import time
from typing import Sequence

from .exceptions import (
    BreakOutsideWindowError,
    BreakOverlapError,
    InvalidWindowError,
    TooManyBreaksError,
)
from .models import MAX_BREAKS, BreakInterval, format_time


def validate_window(start: time, end: time) -> None:
    """
    Check that a working window opens before it closes.

    Raises:
        InvalidWindowError: If start is not before end
    """
    if start >= end:
        raise InvalidWindowError(
            f"Start time {format_time(start)} must be before end time {format_time(end)}"
        )


def validate_break(
    candidate: BreakInterval,
    window_start: time,
    window_end: time,
    existing_breaks: Sequence[BreakInterval],
) -> None:
    """
    Check that a new break can be added to a day.

    Checks run in order: break cap, containment in the window, overlap with
    the existing breaks.

    Raises:
        TooManyBreaksError: If the day already has MAX_BREAKS breaks
        BreakOutsideWindowError: If the break starts before or ends after the window
        BreakOverlapError: If the break overlaps an existing break
    """
    if len(existing_breaks) >= MAX_BREAKS:
        raise TooManyBreaksError(f"A day can have at most {MAX_BREAKS} breaks")

    if candidate.start_time < window_start or candidate.end_time > window_end:
        raise BreakOutsideWindowError(
            f"Break {candidate} must be within working hours "
            f"{format_time(window_start)}-{format_time(window_end)}"
        )

    for other in existing_breaks:
        if candidate.overlaps(other):
            raise BreakOverlapError(f"Break {candidate} overlaps existing break {other}")


def validate_breaks(
    window_start: time,
    window_end: time,
    breaks: Sequence[BreakInterval],
) -> None:
    """
    Re-validate a complete break list against a window.

    Every break is checked against the ones before it, exactly as if the list
    had been built with validate_break one entry at a time.
    """
    for index, candidate in enumerate(breaks):
        validate_break(candidate, window_start, window_end, breaks[:index])


def validate_day(start: time, end: time, breaks: Sequence[BreakInterval]) -> None:
    """Validate a window together with its breaks."""
    validate_window(start, end)
    validate_breaks(start, end, breaks)
