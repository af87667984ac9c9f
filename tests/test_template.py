"""
Tests for the weekly template model.
"""

from datetime import time

import pytest

from doctorschedule.domain.exceptions import (
    BreakOutsideWindowError,
    InvalidSlotDurationError,
    InvalidWindowError,
    TooManyBreaksError,
)
from doctorschedule.domain.models import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    BreakInterval,
    DaySchedule,
    FullTemplate,
    SlotDuration,
)
from doctorschedule.domain.template import WeeklyTemplate


def _configured_monday() -> WeeklyTemplate:
    template = WeeklyTemplate()
    template.toggle_day(MONDAY)
    template.set_window(MONDAY, time(9, 0), time(17, 0))
    template.add_break(MONDAY, BreakInterval.parse("12:00-13:00"))
    return template


class TestWeeklyTemplate:
    """Tests for WeeklyTemplate editing operations."""

    def test_new_template_has_seven_inactive_days(self):
        """Test that a fresh template has every day, all inactive."""
        template = WeeklyTemplate()

        days = template.days()
        assert [d.day_of_week for d in days] == list(range(7))
        assert not any(d.is_active for d in days)
        assert days[SUNDAY].day_name == "Sunday"
        assert days[MONDAY].day_short == "Mon"

    def test_toggle_day_keeps_configuration(self):
        """Test that switching a day off and on restores hours and breaks."""
        template = _configured_monday()

        assert template.toggle_day(MONDAY) is False
        assert template.toggle_day(MONDAY) is True

        monday = template.day(MONDAY)
        assert monday.start_time == time(9, 0)
        assert monday.break_times == [BreakInterval.parse("12:00-13:00")]

    def test_set_window_rejects_reversed_hours(self):
        """Test that an invalid window leaves the previous one in place."""
        template = _configured_monday()

        with pytest.raises(InvalidWindowError):
            template.set_window(MONDAY, time(18, 0), time(8, 0))

        assert template.day(MONDAY).window_display() == "09:00 - 17:00"

    def test_shrinking_window_past_a_break_is_rejected(self):
        """Test that existing breaks are re-validated when the window changes."""
        template = _configured_monday()

        with pytest.raises(BreakOutsideWindowError):
            template.set_window(MONDAY, time(9, 0), time(12, 30))

        assert template.day(MONDAY).end_time == time(17, 0)

    def test_shrinking_window_around_breaks_is_allowed(self):
        """Test that a window change keeping all breaks inside succeeds."""
        template = _configured_monday()

        template.set_window(MONDAY, time(11, 0), time(14, 0))

        assert template.day(MONDAY).window_display() == "11:00 - 14:00"

    def test_set_slot_duration(self):
        """Test slot duration changes and rejection of unsupported values."""
        template = WeeklyTemplate()

        template.set_slot_duration(TUESDAY, 45)
        assert template.day(TUESDAY).slot_duration is SlotDuration.FORTY_FIVE

        with pytest.raises(InvalidSlotDurationError):
            template.set_slot_duration(TUESDAY, 20)
        assert template.day(TUESDAY).slot_duration is SlotDuration.FORTY_FIVE

    def test_break_outside_window_leaves_day_unchanged(self):
        """Test that a break outside working hours is rejected."""
        template = WeeklyTemplate()
        template.toggle_day(MONDAY)
        template.set_window(MONDAY, time(9, 0), time(17, 0))

        with pytest.raises(BreakOutsideWindowError):
            template.add_break(MONDAY, BreakInterval.parse("08:00-09:30"))

        monday = template.day(MONDAY)
        assert monday.break_times == []
        assert monday.is_active
        assert monday.window_display() == "09:00 - 17:00"

    def test_third_break_is_rejected(self):
        """Test that only two breaks fit in a day and the first two survive."""
        template = WeeklyTemplate()
        template.toggle_day(MONDAY)
        template.add_break(MONDAY, BreakInterval.parse("10:00-10:15"))
        template.add_break(MONDAY, BreakInterval.parse("12:00-13:00"))

        with pytest.raises(TooManyBreaksError):
            template.add_break(MONDAY, BreakInterval.parse("15:00-15:30"))

        assert [str(b) for b in template.day(MONDAY).break_times] == ["10:00-10:15", "12:00-13:00"]

    def test_remove_break(self):
        """Test removal by index."""
        template = _configured_monday()

        removed = template.remove_break(MONDAY, 0)

        assert str(removed) == "12:00-13:00"
        assert template.day(MONDAY).break_times == []

    def test_unknown_day_raises(self):
        """Test that days outside 0-6 are rejected."""
        with pytest.raises(ValueError):
            WeeklyTemplate().day(7)


class TestCopyToWeekdays:
    """Tests for copy_to_weekdays."""

    def test_copies_to_tuesday_through_friday(self):
        """Test that Tue-Fri receive Monday's configuration."""
        template = _configured_monday()
        template.set_slot_duration(MONDAY, 15)

        targets = template.copy_to_weekdays(MONDAY)

        assert targets == [TUESDAY, WEDNESDAY, THURSDAY, FRIDAY]
        monday = template.day(MONDAY)
        for dow in targets:
            day = template.day(dow)
            assert day.is_active == monday.is_active
            assert day.start_time == monday.start_time
            assert day.end_time == monday.end_time
            assert day.slot_duration == monday.slot_duration
            assert day.break_times == monday.break_times

    def test_copies_are_independent(self):
        """Test that copied break lists are not shared with the source."""
        template = _configured_monday()
        template.copy_to_weekdays(MONDAY)

        template.remove_break(TUESDAY, 0)
        template.add_break(WEDNESDAY, BreakInterval.parse("15:00-15:30"))

        assert len(template.day(MONDAY).break_times) == 1
        assert template.day(MONDAY).break_times is not template.day(THURSDAY).break_times

    def test_weekend_untouched(self):
        """Test that Saturday and Sunday are never overwritten."""
        template = _configured_monday()
        template.toggle_day(SATURDAY)
        template.set_window(SATURDAY, time(10, 0), time(13, 0))
        saturday_before = template.day(SATURDAY).copy()
        sunday_before = template.day(SUNDAY).copy()

        template.copy_to_weekdays(MONDAY)

        assert template.day(SATURDAY) == saturday_before
        assert template.day(SUNDAY) == sunday_before

    def test_copy_from_weekend_day(self):
        """Test that a weekend source still only writes Mon-Fri."""
        template = WeeklyTemplate()
        template.toggle_day(SATURDAY)

        targets = template.copy_to_weekdays(SATURDAY)

        assert targets == [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY]
        assert not template.day(SUNDAY).is_active


class TestTemplateShapes:
    """Tests for the read and write shapes of the template."""

    def test_active_days_patch_contains_only_active_days(self):
        """Test that the write shape leaves inactive days out."""
        template = _configured_monday()
        template.toggle_day(THURSDAY)

        patch = template.active_days_patch()

        assert patch.day_numbers == [MONDAY, THURSDAY]

    def test_patch_is_a_copy(self):
        """Test that later edits do not leak into a built patch."""
        template = _configured_monday()
        patch = template.active_days_patch()

        template.remove_break(MONDAY, 0)

        assert len(patch.days[0].break_times) == 1

    def test_full_template_requires_seven_days(self):
        """Test that the read shape must cover every weekday."""
        with pytest.raises(ValueError, match="exactly one entry per day"):
            FullTemplate(days=(DaySchedule(day_of_week=MONDAY),))

    def test_full_template_complete_fills_missing_days(self):
        """Test that missing weekdays are filled with inactive defaults."""
        full = FullTemplate.complete([DaySchedule(day_of_week=FRIDAY, is_active=True)])

        assert len(full.days) == 7
        assert full.day(FRIDAY).is_active
        assert not full.day(MONDAY).is_active

    def test_round_trip_through_full_template(self):
        """Test that a template rebuilt from its read shape is equal."""
        template = _configured_monday()

        rebuilt = WeeklyTemplate.from_full_template(template.to_full_template())

        assert rebuilt.days() == template.days()
