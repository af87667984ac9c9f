"""
Editable weekly template: seven day schedules mutated in place by the doctor.
"""

import logging
from datetime import time
from typing import Dict, List

from .models import (
    WEEKDAYS,
    ActiveDaysPatch,
    BreakInterval,
    DaySchedule,
    FullTemplate,
    SlotDuration,
)
from .validator import validate_break, validate_breaks, validate_window

logger = logging.getLogger(__name__)


class WeeklyTemplate:
    """
    Working draft of the doctor's recurring weekly availability.

    Every day of the week is always present; inactive days keep their hours
    and breaks so that re-enabling a day restores its prior configuration.
    Failed operations raise a ValidationError and leave the day untouched.
    """

    def __init__(self, days: List[DaySchedule] | None = None):
        self._days: Dict[int, DaySchedule] = {
            dow: DaySchedule(day_of_week=dow) for dow in range(7)
        }
        for day in days or []:
            self._days[day.day_of_week] = day.copy()

    @classmethod
    def from_full_template(cls, full: FullTemplate) -> "WeeklyTemplate":
        return cls(list(full.days))

    def to_full_template(self) -> FullTemplate:
        return FullTemplate(days=tuple(day.copy() for day in self.days()))

    def day(self, day_of_week: int) -> DaySchedule:
        """Return the live schedule for a weekday (0=Sunday)."""
        if day_of_week not in self._days:
            raise ValueError(f"day_of_week must be between 0 and 6, got {day_of_week}")
        return self._days[day_of_week]

    def days(self) -> List[DaySchedule]:
        return [self._days[dow] for dow in range(7)]

    def active_days(self) -> List[DaySchedule]:
        return [day for day in self.days() if day.is_active]

    def toggle_day(self, day_of_week: int) -> bool:
        """Flip a day's active flag and return the new value."""
        day = self.day(day_of_week)
        day.is_active = not day.is_active
        return day.is_active

    def set_window(self, day_of_week: int, start: time, end: time) -> None:
        """
        Change a day's working hours.

        Existing breaks must still fit inside the new window, otherwise the
        change is rejected.
        """
        day = self.day(day_of_week)
        validate_window(start, end)
        validate_breaks(start, end, day.break_times)
        day.start_time = start
        day.end_time = end

    def set_slot_duration(self, day_of_week: int, duration: "SlotDuration | int") -> None:
        self.day(day_of_week).slot_duration = SlotDuration.parse(duration)

    def add_break(self, day_of_week: int, candidate: BreakInterval) -> None:
        day = self.day(day_of_week)
        validate_break(candidate, day.start_time, day.end_time, day.break_times)
        day.break_times.append(candidate)

    def remove_break(self, day_of_week: int, index: int) -> BreakInterval:
        return self.day(day_of_week).break_times.pop(index)

    def copy_to_weekdays(self, source_day_of_week: int) -> List[int]:
        """
        Copy one day's configuration onto Monday to Friday.

        Saturday and Sunday are never touched. Returns the overwritten days.
        """
        source = self.day(source_day_of_week)
        targets = [dow for dow in WEEKDAYS if dow != source_day_of_week]

        for dow in targets:
            target = self._days[dow]
            target.is_active = source.is_active
            target.start_time = source.start_time
            target.end_time = source.end_time
            target.slot_duration = source.slot_duration
            target.break_times = list(source.break_times)

        logger.debug("Copied %s schedule to days %s", source.day_name, targets)
        return targets

    def active_days_patch(self) -> ActiveDaysPatch:
        """Build the write payload: only the days that are currently active."""
        return ActiveDaysPatch(days=tuple(day.copy() for day in self.active_days()))
