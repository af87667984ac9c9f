"""
Resolution of template + override into the effective schedule of a date.

Pure functions: no I/O, no mutation of the inputs, identical output for
identical input.
"""

from datetime import date
from typing import Iterable, List, Mapping

from .models import DayOverride, EffectiveSchedule, as_calendar_date, weekday_of


def resolve(template, target_date: date, override: DayOverride | None = None) -> EffectiveSchedule:
    """
    Decide the effective schedule for a date.

    1. An override for the date wins outright, whatever the template says.
    2. Otherwise the template entry for the date's weekday is used verbatim;
       an inactive day resolves to unavailable.

    Args:
        template: WeeklyTemplate or FullTemplate (anything with ``day(dow)``)
        target_date: Calendar date to resolve
        override: Override stored for that date, if any

    Returns:
        EffectiveSchedule for the date
    """
    target_date = as_calendar_date(target_date)

    if override is not None:
        if as_calendar_date(override.date) != target_date:
            raise ValueError(f"Override for {override.date} cannot resolve {target_date}")
        return _build(
            target_date,
            source="override",
            is_available=override.is_available,
            schedule=override,
        )

    day = template.day(weekday_of(target_date))
    return _build(target_date, source="template", is_available=day.is_active, schedule=day)


def resolve_range(
    template,
    start_date: date,
    days: int,
    overrides: Iterable[DayOverride] | Mapping[date, DayOverride] = (),
) -> List[EffectiveSchedule]:
    """Resolve ``days`` consecutive dates starting at start_date."""
    if isinstance(overrides, Mapping):
        by_date = {as_calendar_date(d): o for d, o in overrides.items()}
    else:
        by_date = {as_calendar_date(o.date): o for o in overrides}

    start = as_calendar_date(start_date)
    resolved: List[EffectiveSchedule] = []
    for offset in range(days):
        current = start.add(days=offset)
        resolved.append(resolve(template, current, by_date.get(current)))
    return resolved


def _build(target_date: date, *, source: str, is_available: bool, schedule) -> EffectiveSchedule:
    if not is_available:
        return EffectiveSchedule(date=target_date, is_available=False, source=source)

    return EffectiveSchedule(
        date=target_date,
        is_available=True,
        source=source,
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        slot_duration=schedule.slot_duration,
        break_times=tuple(schedule.break_times),
    )
