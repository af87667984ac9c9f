"""
Contract of the remote availability store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Protocol

from ..domain.models import ActiveDaysPatch, DayOverride, FullTemplate


@dataclass(frozen=True)
class TemplateSaveResult:
    """Outcome of saving the weekly template."""
    message: str


@dataclass(frozen=True)
class OverrideWriteResult:
    """
    Outcome of creating or updating a date override.

    ``warning`` is advisory (e.g. booked appointments on that date); the
    write itself succeeded.
    """
    message: str
    override: DayOverride
    warning: str | None = None
    created: bool = False


@dataclass(frozen=True)
class OverrideDeleteResult:
    """Outcome of deleting a date override."""
    message: str
    override_id: str


class AvailabilityGateway(Protocol):
    """Protocol describing the remote operations needed by the engine."""

    async def get_weekly_template(self) -> FullTemplate:
        """Return all seven days of the stored template."""

    async def save_weekly_template(self, patch: ActiveDaysPatch) -> TemplateSaveResult:
        """
        Upsert the active days of the template.

        Days missing from the patch must be left exactly as they are.
        """

    async def list_overrides(
        self,
        start: date,
        end: date,
        include_unavailable: bool,
    ) -> List[DayOverride]:
        """Return the overrides stored between start and end (inclusive)."""

    async def create_override(self, override: DayOverride) -> OverrideWriteResult:
        """Store a new override."""

    async def update_override(self, override_id: str, override: DayOverride) -> OverrideWriteResult:
        """Replace an existing override in place."""

    async def delete_override(self, override_id: str) -> OverrideDeleteResult:
        """
        Remove an override so the date follows the weekly template again.

        Stores refuse to delete a date that still has booked appointments.
        """
