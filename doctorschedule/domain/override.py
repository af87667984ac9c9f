"""
Per-date override drafts and the edit session that drives them.
"""

from dataclasses import dataclass
from datetime import date, time

from .exceptions import IllegalTransitionError
from .models import (
    DEFAULT_END_TIME,
    DEFAULT_SLOT_DURATION,
    DEFAULT_START_TIME,
    BreakInterval,
    DayOverride,
    SlotDuration,
    as_calendar_date,
    weekday_of,
)
from .validator import validate_break, validate_breaks, validate_day, validate_window


class OverrideDraft:
    """
    Working copy of a date override while the doctor edits it.

    Hours and breaks are checked as they are edited whenever the date is
    available; validate() re-checks everything before a save.
    """

    def __init__(self, override: DayOverride):
        self._override = override.copy()

    @classmethod
    def seed(
        cls,
        target_date: date,
        template=None,
        existing: DayOverride | None = None,
        default_start: time = DEFAULT_START_TIME,
        default_end: time = DEFAULT_END_TIME,
        default_slot_duration: SlotDuration = DEFAULT_SLOT_DURATION,
    ) -> "OverrideDraft":
        """
        Open a draft for a date.

        An existing override seeds the draft as-is. Otherwise the template's
        weekday is used when that day is active, falling back to the
        defaults. New drafts always start out available.
        """
        if existing is not None:
            return cls(existing)

        override = DayOverride(
            date=target_date,
            is_available=True,
            start_time=default_start,
            end_time=default_end,
            slot_duration=default_slot_duration,
        )

        if template is not None:
            day = template.day(weekday_of(target_date))
            if day.is_active:
                override.start_time = day.start_time
                override.end_time = day.end_time
                override.slot_duration = day.slot_duration
                override.break_times = list(day.break_times)

        return cls(override)

    @property
    def date(self) -> date:
        return self._override.date

    @property
    def override_id(self) -> str | None:
        return self._override.id

    @property
    def is_available(self) -> bool:
        return self._override.is_available

    @property
    def start_time(self) -> time:
        return self._override.start_time

    @property
    def end_time(self) -> time:
        return self._override.end_time

    @property
    def slot_duration(self) -> SlotDuration:
        return self._override.slot_duration

    @property
    def break_times(self) -> tuple[BreakInterval, ...]:
        return tuple(self._override.break_times)

    def set_available(self, available: bool) -> None:
        """Mark the date available or blocked; becoming available re-checks the hours."""
        if available:
            validate_day(self._override.start_time, self._override.end_time, self._override.break_times)
        self._override.is_available = available

    def set_window(self, start: time, end: time) -> None:
        if self._override.is_available:
            validate_window(start, end)
            validate_breaks(start, end, self._override.break_times)
        self._override.start_time = start
        self._override.end_time = end

    def set_slot_duration(self, duration: "SlotDuration | int") -> None:
        self._override.slot_duration = SlotDuration.parse(duration)

    def add_break(self, candidate: BreakInterval) -> None:
        validate_break(
            candidate,
            self._override.start_time,
            self._override.end_time,
            self._override.break_times,
        )
        self._override.break_times.append(candidate)

    def remove_break(self, index: int) -> BreakInterval:
        return self._override.break_times.pop(index)

    def validate(self) -> None:
        """Raise a ValidationError if the draft cannot be saved."""
        if self._override.is_available:
            validate_day(self._override.start_time, self._override.end_time, self._override.break_times)

    def to_override(self) -> DayOverride:
        return self._override.copy()


# Edit session states

@dataclass(frozen=True)
class Closed:
    """No date is being edited."""


@dataclass(frozen=True)
class Loading:
    """The stored override for a date is being fetched."""
    date: date


@dataclass(frozen=True)
class Draft:
    """A draft is open for editing."""
    draft: OverrideDraft


@dataclass(frozen=True)
class Saving:
    """The draft is being written back."""
    draft: OverrideDraft


@dataclass(frozen=True)
class Error:
    """
    Loading or saving failed.

    The draft is kept (when one was loaded) so the doctor can retry.
    """
    reason: str
    draft: OverrideDraft | None = None


class OverrideEditSession:
    """
    State machine for editing the override of one date at a time.

    Closed -> Loading -> Draft -> Saving -> Closed, with Error reachable from
    Loading and Saving. Transitions that do not fit the current state raise
    IllegalTransitionError.
    """

    def __init__(self):
        self.state: Closed | Loading | Draft | Saving | Error = Closed()

    @property
    def is_busy(self) -> bool:
        return isinstance(self.state, (Loading, Saving))

    @property
    def date(self) -> date | None:
        state = self.state
        if isinstance(state, Loading):
            return state.date
        if isinstance(state, (Draft, Saving)):
            return state.draft.date
        if isinstance(state, Error) and state.draft is not None:
            return state.draft.date
        return None

    def _require(self, *allowed: type, action: str) -> None:
        if not isinstance(self.state, allowed):
            raise IllegalTransitionError(
                f"Cannot {action} while the session is {type(self.state).__name__}"
            )

    def open(self, target_date: date) -> None:
        """Start loading a date; any unsaved draft is discarded."""
        self._require(Closed, Draft, Error, action="open a date")
        self.state = Loading(date=as_calendar_date(target_date))

    def loaded(self, draft: OverrideDraft) -> OverrideDraft:
        self._require(Loading, action="accept a loaded draft")
        if draft.date != self.state.date:
            raise IllegalTransitionError(
                f"Loaded draft for {draft.date} does not match {self.state.date}"
            )
        self.state = Draft(draft=draft)
        return draft

    def load_failed(self, reason: str) -> None:
        self._require(Loading, action="fail loading")
        self.state = Error(reason=reason)

    def edit(self) -> OverrideDraft:
        """Return the open draft; a failed save goes back to Draft for editing."""
        state = self.state
        if isinstance(state, Draft):
            return state.draft
        if isinstance(state, Error) and state.draft is not None:
            self.state = Draft(draft=state.draft)
            return state.draft
        raise IllegalTransitionError(
            f"Cannot edit while the session is {type(state).__name__}"
        )

    def begin_save(self) -> OverrideDraft:
        if isinstance(self.state, Error):
            self.edit()
        self._require(Draft, action="save")
        draft = self.state.draft
        self.state = Saving(draft=draft)
        return draft

    def save_succeeded(self) -> None:
        self._require(Saving, action="complete a save")
        self.state = Closed()

    def save_failed(self, reason: str) -> None:
        self._require(Saving, action="fail a save")
        self.state = Error(reason=reason, draft=self.state.draft)

    def cancel(self) -> None:
        """Close the session without writing anything."""
        self._require(Closed, Loading, Draft, Error, action="cancel")
        self.state = Closed()
