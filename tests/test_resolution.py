"""
Tests for schedule resolution.
"""

from datetime import date, time

import pendulum
import pytest

from doctorschedule.domain.models import MONDAY, TUESDAY, BreakInterval, DayOverride, weekday_of
from doctorschedule.domain.resolution import resolve, resolve_range
from doctorschedule.domain.template import WeeklyTemplate

MONDAY_DATE = pendulum.date(2025, 6, 9)
TUESDAY_DATE = pendulum.date(2025, 6, 10)


def _template() -> WeeklyTemplate:
    template = WeeklyTemplate()
    template.toggle_day(MONDAY)
    template.set_window(MONDAY, time(9, 0), time(17, 0))
    template.add_break(MONDAY, BreakInterval.parse("12:00-13:00"))
    return template


class TestResolve:
    """Tests for resolve."""

    def test_weekday_numbering_starts_on_sunday(self):
        """Test the Sunday = 0 convention."""
        assert weekday_of(pendulum.date(2025, 6, 8)) == 0
        assert weekday_of(MONDAY_DATE) == MONDAY
        assert weekday_of(date(2025, 6, 14)) == 6

    def test_active_template_day(self):
        """Test that an active weekday is used verbatim."""
        schedule = resolve(_template(), MONDAY_DATE)

        assert schedule.is_available
        assert schedule.source == "template"
        assert schedule.start_time == time(9, 0)
        assert schedule.end_time == time(17, 0)
        assert [str(b) for b in schedule.break_times] == ["12:00-13:00"]

    def test_inactive_template_day(self):
        """Test that an inactive weekday resolves to unavailable."""
        schedule = resolve(_template(), TUESDAY_DATE)

        assert not schedule.is_available
        assert schedule.start_time is None
        assert schedule.break_times == ()

    def test_override_blocks_active_day(self):
        """Test that an unavailable override beats an active template day."""
        override = DayOverride(date=MONDAY_DATE, is_available=False)

        schedule = resolve(_template(), MONDAY_DATE, override)

        assert not schedule.is_available
        assert schedule.source == "override"

    def test_override_opens_inactive_day(self):
        """Test that an available override beats an inactive template day."""
        override = DayOverride(
            date=TUESDAY_DATE,
            is_available=True,
            start_time=time(10, 0),
            end_time=time(14, 0),
        )

        schedule = resolve(_template(), TUESDAY_DATE, override)

        assert schedule.is_available
        assert schedule.source == "override"
        assert (schedule.start_time, schedule.end_time) == (time(10, 0), time(14, 0))

    def test_resolution_is_idempotent(self):
        """Test that identical inputs give identical outputs and nothing is mutated."""
        template = _template()
        override = DayOverride(date=MONDAY_DATE, is_available=True, start_time=time(8, 0))
        before = template.days()[MONDAY].copy()

        first = resolve(template, MONDAY_DATE, override)
        second = resolve(template, MONDAY_DATE, override)

        assert first == second
        assert template.day(MONDAY) == before

    def test_override_for_other_date_rejected(self):
        """Test that an override must belong to the resolved date."""
        with pytest.raises(ValueError):
            resolve(_template(), MONDAY_DATE, DayOverride(date=TUESDAY_DATE))

    def test_format_display(self):
        """Test the human-readable summary."""
        schedule = resolve(_template(), MONDAY_DATE)

        assert schedule.format_display() == (
            "Monday, 2025-06-09 | 09:00 – 17:00 (30 min slots) | breaks 12:00-13:00"
        )


class TestResolveRange:
    """Tests for resolve_range."""

    def test_week_with_one_override(self):
        """Test resolving seven days with one override."""
        overrides = [DayOverride(date=TUESDAY_DATE, start_time=time(10, 0), end_time=time(14, 0))]

        week = resolve_range(_template(), pendulum.date(2025, 6, 8), 7, overrides)

        assert [s.date for s in week] == [pendulum.date(2025, 6, 8).add(days=i) for i in range(7)]
        assert [s.is_available for s in week] == [False, True, True, False, False, False, False]
        assert week[2].source == "override"

    def test_accepts_mapping_of_overrides(self):
        """Test that overrides may be given keyed by date."""
        override = DayOverride(date=MONDAY_DATE, is_available=False)

        days = resolve_range(_template(), MONDAY_DATE, 1, {MONDAY_DATE: override})

        assert not days[0].is_available
