"""
Wire format of the platform's availability API.

The API speaks camelCase JSON; these pydantic models translate between that
shape and the domain models.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.models import (
    BreakInterval,
    DayOverride,
    DaySchedule,
    format_time,
    parse_calendar_date,
    parse_time,
)


class WireModel(BaseModel):
    """Base model accepting both aliases and field names, ignoring unknown keys."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class BreakTimePayload(WireModel):
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @classmethod
    def from_domain(cls, interval: BreakInterval) -> "BreakTimePayload":
        return cls(start_time=format_time(interval.start_time), end_time=format_time(interval.end_time))

    def to_domain(self) -> BreakInterval:
        return BreakInterval(start_time=parse_time(self.start_time), end_time=parse_time(self.end_time))


def _coerce_breaks(value: Any) -> Any:
    """Accept ``"HH:MM-HH:MM"`` strings as well as ``{startTime, endTime}`` objects."""
    if value is None:
        return []
    if not isinstance(value, list):
        return value

    coerced = []
    for item in value:
        if isinstance(item, str):
            start, _, end = item.partition("-")
            coerced.append({"startTime": start.strip(), "endTime": end.strip()})
        else:
            coerced.append(item)
    return coerced


class DaySchedulePayload(WireModel):
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)
    is_active: bool = Field(default=False, alias="isActive")
    start_time: str = Field(default="09:00", alias="startTime")
    end_time: str = Field(default="17:00", alias="endTime")
    slot_duration: int = Field(default=30, alias="slotDuration")
    break_times: List[BreakTimePayload] = Field(default_factory=list, alias="breakTimes")

    @field_validator("break_times", mode="before")
    @classmethod
    def normalise_breaks(cls, value: Any) -> Any:
        return _coerce_breaks(value)

    @classmethod
    def from_domain(cls, day: DaySchedule) -> "DaySchedulePayload":
        return cls(
            day_of_week=day.day_of_week,
            is_active=day.is_active,
            start_time=format_time(day.start_time),
            end_time=format_time(day.end_time),
            slot_duration=int(day.slot_duration),
            break_times=[BreakTimePayload.from_domain(b) for b in day.break_times],
        )

    def to_domain(self) -> DaySchedule:
        return DaySchedule(
            day_of_week=self.day_of_week,
            is_active=self.is_active,
            start_time=parse_time(self.start_time),
            end_time=parse_time(self.end_time),
            slot_duration=self.slot_duration,
            break_times=[b.to_domain() for b in self.break_times],
        )


class DayOverridePayload(WireModel):
    id: str | None = None
    date: str
    is_available: bool = Field(default=True, alias="isAvailable")
    start_time: str = Field(default="09:00", alias="startTime")
    end_time: str = Field(default="17:00", alias="endTime")
    slot_duration: int = Field(default=30, alias="slotDuration")
    break_times: List[BreakTimePayload] = Field(default_factory=list, alias="breakTimes")

    @field_validator("break_times", mode="before")
    @classmethod
    def normalise_breaks(cls, value: Any) -> Any:
        return _coerce_breaks(value)

    @model_validator(mode="before")
    @classmethod
    def accept_single_break_pair(cls, data: Any) -> Any:
        """Older records carry one break as breakStartTime/breakEndTime."""
        if not isinstance(data, dict):
            return data
        start, end = data.get("breakStartTime"), data.get("breakEndTime")
        if start and end and not data.get("breakTimes"):
            data = {**data, "breakTimes": [{"startTime": start, "endTime": end}]}
        return data

    @classmethod
    def from_domain(cls, override: DayOverride) -> "DayOverridePayload":
        return cls(
            id=override.id,
            date=override.date.isoformat(),
            is_available=override.is_available,
            start_time=format_time(override.start_time),
            end_time=format_time(override.end_time),
            slot_duration=int(override.slot_duration),
            break_times=[BreakTimePayload.from_domain(b) for b in override.break_times],
        )

    def to_domain(self) -> DayOverride:
        return DayOverride(
            id=self.id,
            date=parse_calendar_date(self.date),
            is_available=self.is_available,
            start_time=parse_time(self.start_time),
            end_time=parse_time(self.end_time),
            slot_duration=self.slot_duration,
            break_times=[b.to_domain() for b in self.break_times],
        )


class TemplateSaveRequest(WireModel):
    schedules: List[DaySchedulePayload]


class MessageResponse(WireModel):
    message: str = ""


class OverrideWriteResponse(WireModel):
    message: str = ""
    warning: str | None = None
    availability: DayOverridePayload | None = None


class ErrorResponse(WireModel):
    error: str = "Request failed"
    details: Any = None
