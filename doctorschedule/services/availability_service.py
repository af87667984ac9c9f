"""
Application service for editing a doctor's availability.

The service coordinates the remote store (via the AvailabilityGateway
protocol) with the domain models: it loads and saves the weekly template,
drives the per-date override edit session, keeps the customized-dates index
fresh and resolves effective schedules. Keeping the gateway behind a protocol
lets the HTTP adapter and the in-memory stand-in be swapped freely.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, time
from typing import Callable, FrozenSet, Iterator, List

import pendulum

from ..domain.customized_dates import DEFAULT_HORIZON_DAYS, CustomizedDatesIndex, horizon
from ..domain.exceptions import GatewayError, IllegalTransitionError, SaveInProgressError
from ..domain.models import (
    DEFAULT_END_TIME,
    DEFAULT_SLOT_DURATION,
    DEFAULT_START_TIME,
    DayOverride,
    EffectiveSchedule,
    SlotDuration,
    as_calendar_date,
)
from ..domain.override import OverrideDraft, OverrideEditSession
from ..domain.resolution import resolve, resolve_range
from ..domain.template import WeeklyTemplate
from ..domain.validator import validate_day
from .gateway import (
    AvailabilityGateway,
    OverrideDeleteResult,
    OverrideWriteResult,
    TemplateSaveResult,
)

logger = logging.getLogger(__name__)

TEMPLATE_TARGET = "template"


class AvailabilityService:
    """
    Orchestrates template and override editing against the remote store.

    One template draft and one override edit session (one date at a time)
    exist per service. A second save for a target that is already being
    saved raises SaveInProgressError; nothing is queued or retried.
    """

    def __init__(
        self,
        gateway: AvailabilityGateway,
        *,
        timezone: str = "UTC",
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        default_start: time = DEFAULT_START_TIME,
        default_end: time = DEFAULT_END_TIME,
        default_slot_duration: SlotDuration = DEFAULT_SLOT_DURATION,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._gateway = gateway
        self._timezone = timezone
        self._horizon_days = horizon_days
        self._default_start = default_start
        self._default_end = default_end
        self._default_slot_duration = default_slot_duration
        self._today = today or (lambda: pendulum.today(self._timezone).date())
        self._in_flight: set[str] = set()

        self.template: WeeklyTemplate | None = None
        self.session = OverrideEditSession()
        self.customized_dates = CustomizedDatesIndex(self.today(), horizon_days)

    def today(self) -> pendulum.Date:
        return as_calendar_date(self._today())

    def is_saving(self, target: str | date) -> bool:
        return self._target_key(target) in self._in_flight

    @staticmethod
    def _target_key(target: str | date) -> str:
        if isinstance(target, date):
            return as_calendar_date(target).isoformat()
        return target

    @contextmanager
    def _busy(self, target: str | date) -> Iterator[None]:
        key = self._target_key(target)
        if key in self._in_flight:
            raise SaveInProgressError(f"A save for {key} is already in progress")
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    # Weekly template

    async def load_template(self) -> WeeklyTemplate:
        """
        Fetch the stored template and make it the working draft.

        The customized-dates index is rebuilt afterwards; a failure there is
        logged and does not fail the load.
        """
        full = await self._gateway.get_weekly_template()
        self.template = WeeklyTemplate.from_full_template(full)
        logger.debug(
            "Loaded weekly template, active days: %s",
            [day.day_short for day in self.template.active_days()],
        )
        await self._refresh_quietly()
        return self.template

    async def save_template(self, template: WeeklyTemplate | None = None) -> TemplateSaveResult:
        """
        Save the active days of the template.

        Only active days are transmitted; inactive days are never sent, so
        the remote store leaves them as they were.
        """
        template = template or self.template
        if template is None:
            raise ValueError("No template loaded; call load_template() first")

        for day in template.active_days():
            validate_day(day.start_time, day.end_time, day.break_times)

        with self._busy(TEMPLATE_TARGET):
            patch = template.active_days_patch()
            logger.debug("Saving weekly template for days %s", patch.day_numbers)
            result = await self._gateway.save_weekly_template(patch)

        self.template = template
        logger.info("Weekly template saved (%d active days): %s", len(patch), result.message)
        return result

    # Date overrides

    async def load_override(self, target_date: date) -> DayOverride | None:
        """Return the stored override for a date, blocked dates included."""
        target = as_calendar_date(target_date)
        overrides = await self._gateway.list_overrides(target, target, include_unavailable=True)
        for override in overrides:
            if as_calendar_date(override.date) == target:
                return override
        return None

    async def open_override(self, target_date: date) -> OverrideDraft:
        """
        Open the edit session for a date.

        The draft is seeded from the stored override when there is one,
        otherwise from the template's weekday or the defaults.
        """
        self.session.open(target_date)
        target = self.session.date

        try:
            if self.template is None:
                await self.load_template()
            existing = await self.load_override(target)
        except GatewayError as exc:
            self.session.load_failed(str(exc))
            raise

        draft = OverrideDraft.seed(
            target,
            template=self.template,
            existing=existing,
            default_start=self._default_start,
            default_end=self._default_end,
            default_slot_duration=self._default_slot_duration,
        )
        logger.debug(
            "Opened override draft for %s (seeded from %s)",
            target,
            "stored override" if existing else "template",
        )
        return self.session.loaded(draft)

    def cancel_override(self) -> None:
        """Discard the open draft without writing anything."""
        self.session.cancel()

    async def save_override(self) -> OverrideWriteResult:
        """
        Write the open draft back to the store.

        A second save for a date that is already being saved raises
        SaveInProgressError. Local validation runs next and blocks the save.
        The stored record for the date (available or not) is updated in place
        when present, otherwise a new one is created. If the write fails or is
        cancelled, the draft is kept in the session for a retry.
        """
        target = self.session.date
        if target is None:
            raise IllegalTransitionError("No override draft is open")

        with self._busy(target):
            draft = self.session.edit()
            draft.validate()
            self.session.begin_save()
            override = draft.to_override()
            try:
                existing = await self.load_override(target)
                if existing is not None:
                    if not existing.id:
                        raise GatewayError(f"Stored override for {target} has no id")
                    result = await self._gateway.update_override(
                        existing.id, replace(override, id=existing.id)
                    )
                else:
                    result = await self._gateway.create_override(override)
            except GatewayError as exc:
                self.session.save_failed(str(exc))
                logger.warning("Saving override for %s failed: %s", target, exc)
                raise
            except BaseException as exc:
                self.session.save_failed(str(exc) or type(exc).__name__)
                raise

            self.session.save_succeeded()

        logger.info(
            "Override for %s %s: %s",
            target,
            "created" if existing is None else "updated",
            result.message,
        )
        if result.warning:
            logger.warning("Override for %s saved with warning: %s", target, result.warning)

        await self._refresh_quietly()
        return result

    async def delete_override(self, target_date: date) -> OverrideDeleteResult | None:
        """
        Delete the stored override of a date so it follows the template again.

        Returns None when the date has no override. The store refuses dates
        with booked appointments; that refusal is raised as a GatewayError.
        """
        target = as_calendar_date(target_date)

        with self._busy(target):
            existing = await self.load_override(target)
            if existing is None:
                logger.info("No override stored for %s, nothing to delete", target)
                return None
            if not existing.id:
                raise GatewayError(f"Stored override for {target} has no id")
            result = await self._gateway.delete_override(existing.id)

        logger.info("Override for %s deleted: %s", target, result.message)
        await self._refresh_quietly()
        return result

    # Customized dates

    async def refresh_customized_dates(self) -> FrozenSet[pendulum.Date]:
        """Rebuild the customized-dates index from the store."""
        index = CustomizedDatesIndex(self.today(), self._horizon_days)
        overrides = await self._gateway.list_overrides(
            index.first, index.last, include_unavailable=False
        )
        dates = index.rebuild(overrides)
        self.customized_dates = index
        logger.debug("Customized dates in horizon: %d", len(dates))
        return dates

    async def _refresh_quietly(self) -> None:
        try:
            await self.refresh_customized_dates()
        except GatewayError as exc:
            logger.warning("Could not refresh customized dates: %s", exc)

    # Resolution

    async def resolve_date(self, target_date: date) -> EffectiveSchedule:
        """Resolve the effective schedule of a date from the stored data."""
        if self.template is None:
            await self.load_template()
        override = await self.load_override(target_date)
        return resolve(self.template, target_date, override)

    async def resolve_upcoming(self, days: int | None = None) -> List[EffectiveSchedule]:
        """Resolve every date from today over ``days`` (default: the horizon)."""
        if days is None:
            days = self._horizon_days
        first, last = horizon(self.today(), days)
        if self.template is None:
            await self.load_template()
        overrides = await self._gateway.list_overrides(first, last, include_unavailable=True)
        return resolve_range(self.template, first, days, overrides)
