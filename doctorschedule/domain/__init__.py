"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .customized_dates import CustomizedDatesIndex
from .models import (
    ActiveDaysPatch,
    BreakInterval,
    DayOverride,
    DaySchedule,
    EffectiveSchedule,
    FullTemplate,
    SlotDuration,
)
from .override import OverrideDraft, OverrideEditSession
from .resolution import resolve, resolve_range
from .template import WeeklyTemplate

__all__ = [
    "ActiveDaysPatch",
    "BreakInterval",
    "CustomizedDatesIndex",
    "DayOverride",
    "DaySchedule",
    "EffectiveSchedule",
    "FullTemplate",
    "OverrideDraft",
    "OverrideEditSession",
    "SlotDuration",
    "WeeklyTemplate",
    "resolve",
    "resolve_range",
]
