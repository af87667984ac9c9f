"""
In-memory availability store for testing and demo runs without the API.
"""

import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from ..domain.exceptions import GatewayError
from ..domain.models import (
    ActiveDaysPatch,
    DayOverride,
    DaySchedule,
    FullTemplate,
    as_calendar_date,
    parse_calendar_date,
)
from ..services.gateway import OverrideDeleteResult, OverrideWriteResult, TemplateSaveResult
from .schemas import DayOverridePayload, DaySchedulePayload

logger = logging.getLogger(__name__)

MOCK_DATA_FILE = Path(__file__).parent / "mock_availability_data.json"


class InMemoryAvailabilityGateway:
    """
    Stand-in for the remote availability API.

    Behaves like the real store where the engine depends on it: template
    saves upsert only the days they carry, creating a second override for a
    date is rejected, and saving an override on a date with booked
    appointments returns an advisory warning while deleting it is refused.
    Every call is recorded in
    ``calls`` for assertions.
    """

    def __init__(
        self,
        days: Iterable[DaySchedule] = (),
        overrides: Iterable[DayOverride] = (),
        booked_appointments: Mapping[date, int] | None = None,
    ):
        full = FullTemplate.complete(days)
        self._days: Dict[int, DaySchedule] = {d.day_of_week: d.copy() for d in full.days}
        self._overrides: Dict[str, DayOverride] = {}
        self._next_id = 1
        self.booked_appointments = {
            as_calendar_date(d): count for d, count in (booked_appointments or {}).items()
        }
        self.calls: List[Tuple[str, Any]] = []

        for override in overrides:
            self._store(override)

    @classmethod
    def from_json_file(cls, data_file: Path = MOCK_DATA_FILE) -> "InMemoryAvailabilityGateway":
        """Load a seeded store from a JSON file in the API's wire format."""
        if not data_file.exists():
            return cls()

        with open(data_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        days = [DaySchedulePayload.model_validate(item).to_domain() for item in data.get("template", [])]
        overrides = [DayOverridePayload.model_validate(item).to_domain() for item in data.get("overrides", [])]
        booked = {
            parse_calendar_date(day): count
            for day, count in data.get("bookedAppointments", {}).items()
        }
        return cls(days=days, overrides=overrides, booked_appointments=booked)

    def _store(self, override: DayOverride) -> DayOverride:
        stored = override.copy()
        if not stored.id:
            stored.id = f"ovr-{self._next_id}"
            self._next_id += 1
        self._overrides[stored.id] = stored
        return stored

    def _find_by_date(self, target: date) -> DayOverride | None:
        for override in self._overrides.values():
            if override.date == target:
                return override
        return None

    def _warning_for(self, target: date) -> str | None:
        booked = self.booked_appointments.get(as_calendar_date(target), 0)
        if not booked:
            return None
        return (
            f"{booked} appointment(s) are already booked on {target.isoformat()}. "
            "Existing bookings are kept; check that the new hours still cover them."
        )

    def day(self, day_of_week: int) -> DaySchedule:
        """Stored template day (a copy)."""
        return self._days[day_of_week].copy()

    def stored_overrides(self) -> List[DayOverride]:
        return sorted((o.copy() for o in self._overrides.values()), key=lambda o: o.date)

    async def get_weekly_template(self) -> FullTemplate:
        self.calls.append(("get_weekly_template", None))
        return FullTemplate(days=tuple(self._days[dow].copy() for dow in range(7)))

    async def save_weekly_template(self, patch: ActiveDaysPatch) -> TemplateSaveResult:
        self.calls.append(("save_weekly_template", patch.day_numbers))
        for day in patch.days:
            self._days[day.day_of_week] = day.copy()
        logger.debug("Stored template days %s", patch.day_numbers)
        return TemplateSaveResult(
            message="Weekly schedule saved. Slots regenerated for the next 30 days."
        )

    async def list_overrides(
        self,
        start: date,
        end: date,
        include_unavailable: bool,
    ) -> List[DayOverride]:
        self.calls.append(("list_overrides", (start, end, include_unavailable)))
        first, last = as_calendar_date(start), as_calendar_date(end)
        return [
            o for o in self.stored_overrides()
            if first <= o.date <= last and (include_unavailable or o.is_available)
        ]

    async def create_override(self, override: DayOverride) -> OverrideWriteResult:
        self.calls.append(("create_override", override.date))
        if self._find_by_date(override.date) is not None:
            raise GatewayError(
                "Availability API returned 400: Availability already exists for this date. "
                "Use update endpoint.",
                status_code=400,
            )

        stored = self._store(replace(override, id=None))
        return OverrideWriteResult(
            message="Availability set successfully",
            warning=self._warning_for(stored.date),
            override=stored.copy(),
            created=True,
        )

    async def update_override(self, override_id: str, override: DayOverride) -> OverrideWriteResult:
        self.calls.append(("update_override", override_id))
        if override_id not in self._overrides:
            raise GatewayError("Availability API returned 404: Availability not found", status_code=404)

        stored = override.copy()
        stored.id = override_id
        self._overrides[override_id] = stored
        return OverrideWriteResult(
            message="Availability updated successfully",
            warning=self._warning_for(stored.date),
            override=stored.copy(),
        )

    async def delete_override(self, override_id: str) -> OverrideDeleteResult:
        self.calls.append(("delete_override", override_id))
        stored = self._overrides.get(override_id)
        if stored is None:
            raise GatewayError("Availability API returned 404: Availability not found", status_code=404)

        booked = self.booked_appointments.get(stored.date, 0)
        if booked:
            raise GatewayError(
                "Availability API returned 400: Cannot delete availability with booked appointments",
                status_code=400,
                details={"bookedAppointments": booked},
            )

        del self._overrides[override_id]
        return OverrideDeleteResult(message="Availability deleted successfully", override_id=override_id)
