"""
Domain models for weekly templates, date overrides and effective schedules.
"""

from dataclasses import dataclass, field, replace
from datetime import date, time
from enum import IntEnum
from typing import Iterable, List, Tuple

import pendulum

from .exceptions import InvalidSlotDurationError, InvalidWindowError

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
WEEKDAYS = (MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY)

MAX_BREAKS = 2
DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(17, 0)


class SlotDuration(IntEnum):
    """Supported appointment granularities in minutes."""
    FIFTEEN = 15
    THIRTY = 30
    FORTY_FIVE = 45
    SIXTY = 60

    @classmethod
    def parse(cls, value: "int | str | SlotDuration") -> "SlotDuration":
        """Convert a raw minute value into a SlotDuration."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            allowed = ", ".join(str(member.value) for member in cls)
            raise InvalidSlotDurationError(
                f"Slot duration must be one of {allowed} minutes, got {value!r}"
            ) from None


DEFAULT_SLOT_DURATION = SlotDuration.THIRTY


def parse_time(value: "str | time") -> time:
    """
    Parse a wall-clock ``HH:MM`` string (24h) into a time object.

    Raises:
        ValueError: If the value is not a valid ``HH:MM`` time
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    text = str(value).strip()
    parts = text.split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return time(hour, minute)


def format_time(value: time) -> str:
    """Format a time as ``HH:MM``."""
    return value.strftime("%H:%M")


def as_calendar_date(value: date) -> pendulum.Date:
    """Normalise any date (or datetime) to a pendulum Date without time."""
    return pendulum.date(value.year, value.month, value.day)


def parse_calendar_date(value: str) -> pendulum.Date:
    """
    Parse ``YYYY-MM-DD`` into a calendar date.

    Full ISO timestamps are accepted; only their date part is used.
    """
    return pendulum.from_format(str(value).strip()[:10], "YYYY-MM-DD").date()


def weekday_of(value: date) -> int:
    """Day of week with Sunday = 0 and Saturday = 6."""
    return value.isoweekday() % 7


@dataclass(frozen=True)
class BreakInterval:
    """
    A pause inside a working day.

    Invariant: start_time must be before end_time.
    """
    start_time: time
    end_time: time

    def __post_init__(self):
        if self.start_time >= self.end_time:
            raise InvalidWindowError(
                f"Break start {format_time(self.start_time)} must be before "
                f"break end {format_time(self.end_time)}"
            )

    @classmethod
    def parse(cls, value: str) -> "BreakInterval":
        """Parse ``HH:MM-HH:MM`` into a BreakInterval."""
        start, sep, end = value.partition("-")
        if not sep:
            raise ValueError(f"Invalid break '{value}', expected HH:MM-HH:MM")
        return cls(start_time=parse_time(start), end_time=parse_time(end))

    def overlaps(self, other: "BreakInterval") -> bool:
        """Open-interval overlap; touching breaks do not overlap."""
        return self.start_time < other.end_time and other.start_time < self.end_time

    def __str__(self) -> str:
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"


@dataclass
class DaySchedule:
    """
    Default working pattern for one day of the week.
    """
    day_of_week: int  # 0=Sunday, 6=Saturday
    is_active: bool = False
    start_time: time = DEFAULT_START_TIME
    end_time: time = DEFAULT_END_TIME
    slot_duration: SlotDuration = DEFAULT_SLOT_DURATION
    break_times: List[BreakInterval] = field(default_factory=list)

    def __post_init__(self):
        if self.day_of_week not in range(7):
            raise ValueError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        self.slot_duration = SlotDuration.parse(self.slot_duration)

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    @property
    def day_short(self) -> str:
        return self.day_name[:3]

    def copy(self) -> "DaySchedule":
        """Return an independent copy (break list included)."""
        return replace(self, break_times=list(self.break_times))

    def window_display(self) -> str:
        return f"{format_time(self.start_time)} - {format_time(self.end_time)}"


@dataclass
class DayOverride:
    """
    Schedule for one specific calendar date, superseding the template.

    Hours, slot duration and breaks only matter while is_available is True.
    """
    date: date
    is_available: bool = True
    start_time: time = DEFAULT_START_TIME
    end_time: time = DEFAULT_END_TIME
    slot_duration: SlotDuration = DEFAULT_SLOT_DURATION
    break_times: List[BreakInterval] = field(default_factory=list)
    id: str | None = None  # Assigned by the remote store

    def __post_init__(self):
        self.date = as_calendar_date(self.date)
        self.slot_duration = SlotDuration.parse(self.slot_duration)

    def copy(self) -> "DayOverride":
        return replace(self, break_times=list(self.break_times))


@dataclass(frozen=True)
class EffectiveSchedule:
    """
    What actually governs bookability on a date after resolution.

    Hours and slot duration are None when the date is unavailable.
    """
    date: date
    is_available: bool
    source: str  # "override" or "template"
    start_time: time | None = None
    end_time: time | None = None
    slot_duration: SlotDuration | None = None
    break_times: Tuple[BreakInterval, ...] = ()

    def format_display(self) -> str:
        """
        Format the schedule for display.
        Format: Weekday, YYYY-MM-DD | HH:MM – HH:MM (30 min slots)
        """
        day = f"{DAY_NAMES[weekday_of(self.date)]}, {self.date.isoformat()}"
        if not self.is_available:
            return f"{day} | unavailable"

        text = (
            f"{day} | {format_time(self.start_time)} – {format_time(self.end_time)} "
            f"({int(self.slot_duration)} min slots)"
        )
        if self.break_times:
            text += " | breaks " + ", ".join(str(b) for b in self.break_times)
        return text


@dataclass(frozen=True)
class FullTemplate:
    """
    Read shape of the weekly template: always seven days, Sunday first.
    """
    days: Tuple[DaySchedule, ...]

    def __post_init__(self):
        ordered = tuple(sorted(self.days, key=lambda d: d.day_of_week))
        if [d.day_of_week for d in ordered] != list(range(7)):
            raise ValueError(
                "A full template needs exactly one entry per day of week (0-6), "
                f"got {[d.day_of_week for d in self.days]}"
            )
        object.__setattr__(self, "days", ordered)

    @classmethod
    def complete(cls, days: Iterable[DaySchedule]) -> "FullTemplate":
        """Build a full template, filling missing weekdays with inactive defaults."""
        by_day = {d.day_of_week: d for d in days}
        return cls(days=tuple(by_day.get(dow) or DaySchedule(day_of_week=dow) for dow in range(7)))

    def day(self, day_of_week: int) -> DaySchedule:
        return self.days[day_of_week]


@dataclass(frozen=True)
class ActiveDaysPatch:
    """
    Write shape of the weekly template: only the days currently active.

    Days absent from the patch are left untouched by the remote store.
    """
    days: Tuple[DaySchedule, ...]

    def __post_init__(self):
        seen: set[int] = set()
        for day in self.days:
            if not day.is_active:
                raise ValueError(f"{day.day_name} is inactive and cannot be part of an active-days patch")
            if day.day_of_week in seen:
                raise ValueError(f"{day.day_name} appears more than once in the patch")
            seen.add(day.day_of_week)

    @property
    def day_numbers(self) -> List[int]:
        return [d.day_of_week for d in self.days]

    def __len__(self) -> int:
        return len(self.days)
