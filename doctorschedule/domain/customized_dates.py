"""
Index of dates within the rolling horizon that carry an override.
"""

from datetime import date
from typing import FrozenSet, Iterable, Tuple

import pendulum

from .models import DayOverride, as_calendar_date

DEFAULT_HORIZON_DAYS = 30


def horizon(today: date, days: int = DEFAULT_HORIZON_DAYS) -> Tuple[pendulum.Date, pendulum.Date]:
    """Return the inclusive (first, last) dates of the rolling horizon."""
    if days < 1:
        raise ValueError(f"Horizon must cover at least one day, got {days}")
    first = as_calendar_date(today)
    return first, first.add(days=days - 1)


class CustomizedDatesIndex:
    """
    Set of dates in [today, today + days - 1] that have an override.

    Only used to annotate a date picker; the override store is authoritative.
    """

    def __init__(self, today: date, days: int = DEFAULT_HORIZON_DAYS):
        self.first, self.last = horizon(today, days)
        self._dates: FrozenSet[pendulum.Date] = frozenset()

    @property
    def dates(self) -> FrozenSet[pendulum.Date]:
        return self._dates

    def rebuild(self, overrides: Iterable[DayOverride]) -> FrozenSet[pendulum.Date]:
        """Replace the index with the dates of the given overrides inside the horizon."""
        self._dates = frozenset(
            d for d in (as_calendar_date(o.date) for o in overrides)
            if self.first <= d <= self.last
        )
        return self._dates

    def contains(self, value: date) -> bool:
        return as_calendar_date(value) in self._dates

    def __contains__(self, value: date) -> bool:
        return self.contains(value)

    def __len__(self) -> int:
        return len(self._dates)
