"""
Tests for the customized-dates index.
"""

from datetime import date

import pendulum
import pytest

from doctorschedule.domain.customized_dates import CustomizedDatesIndex, horizon
from doctorschedule.domain.models import DayOverride

TODAY = pendulum.date(2025, 6, 1)


def test_horizon_covers_thirty_days():
    """The default horizon runs from today to today + 29."""
    first, last = horizon(TODAY)

    assert first == TODAY
    assert last == pendulum.date(2025, 6, 30)


def test_horizon_must_be_positive():
    with pytest.raises(ValueError):
        horizon(TODAY, 0)


def test_rebuild_keeps_only_dates_in_horizon():
    """Overrides outside the horizon are not marked."""
    index = CustomizedDatesIndex(TODAY)
    overrides = [
        DayOverride(date=date(2025, 5, 31)),
        DayOverride(date=date(2025, 6, 1)),
        DayOverride(date=date(2025, 6, 30), is_available=False),
        DayOverride(date=date(2025, 7, 1)),
    ]

    dates = index.rebuild(overrides)

    assert dates == {pendulum.date(2025, 6, 1), pendulum.date(2025, 6, 30)}
    assert date(2025, 6, 1) in index
    assert not index.contains(date(2025, 7, 1))
    assert len(index) == 2


def test_rebuild_replaces_previous_contents():
    """A rebuild is a full replacement, not a merge."""
    index = CustomizedDatesIndex(TODAY)
    index.rebuild([DayOverride(date=date(2025, 6, 5))])

    index.rebuild([DayOverride(date=date(2025, 6, 6))])

    assert index.dates == {pendulum.date(2025, 6, 6)}
