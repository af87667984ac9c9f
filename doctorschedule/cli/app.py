"""
Main CLI application using Typer.
"""

import asyncio
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.api_client import AvailabilityApiClient
from ..adapters.in_memory_gateway import InMemoryAvailabilityGateway
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import GatewayError, ScheduleError, ValidationError
from ..domain.models import (
    DAY_NAMES,
    BreakInterval,
    EffectiveSchedule,
    format_time,
    parse_calendar_date,
    parse_time,
)
from ..domain.override import OverrideDraft
from ..domain.template import WeeklyTemplate
from ..logging_config import setup_logging
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="doctorschedule",
    help="Manage a doctor's weekly availability and date overrides",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled sample data instead of the API.")]
StartOption = Annotated[Optional[str], typer.Option("--start", help="Start of working hours (HH:MM)")]
EndOption = Annotated[Optional[str], typer.Option("--end", help="End of working hours (HH:MM)")]
SlotOption = Annotated[Optional[int], typer.Option("--slot", help="Slot duration in minutes (15, 30, 45, 60)")]
BreakOption = Annotated[Optional[List[str]], typer.Option("--break", "-b", help="Break as HH:MM-HH:MM; repeat for a second break. Replaces existing breaks.")]
ClearBreaksOption = Annotated[bool, typer.Option("--clear-breaks", help="Remove all breaks.")]


def _build_service(config_file: Optional[Path], mock: bool) -> AvailabilityService:
    """Load configuration and wire the service to the API or the sample store."""
    try:
        if config_file:
            config = AppConfig.load_from_yaml(config_file)
        else:
            config = AppConfig.load_or_default(get_default_config_path())
    except (FileNotFoundError, ValueError) as e:
        _fail(f"Could not load configuration: {e}")

    setup_logging(config.log_level)

    if mock:
        console.print("[yellow]⚠  MOCK MODE: using sample data[/yellow]\n")
        gateway = InMemoryAvailabilityGateway.from_json_file()
    else:
        gateway = AvailabilityApiClient(
            base_url=config.api.base_url,
            token=config.api.resolve_token(),
            timeout=config.api.timeout_seconds,
        )

    return AvailabilityService(
        gateway,
        timezone=config.timezone,
        horizon_days=config.horizon_days,
        default_start=config.defaults.get_start_time(),
        default_end=config.defaults.get_end_time(),
        default_slot_duration=config.defaults.get_slot_duration(),
    )


def _parse_day(value: str) -> int:
    """Accept 0-6 (Sunday = 0), full day names or three-letter abbreviations."""
    text = value.strip().lower()
    if text.isdigit() and int(text) in range(7):
        return int(text)
    for index, name in enumerate(DAY_NAMES):
        if text in (name.lower(), name[:3].lower()):
            return index
    raise typer.BadParameter(f"Unknown day '{value}'. Use a day name or 0-6 (Sunday = 0).")


def _parse_date(value: str) -> pendulum.Date:
    try:
        return parse_calendar_date(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD.") from None


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _run(coro):
    """Run a coroutine, mapping engine errors to a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except ValidationError as e:
        _fail(f"Invalid schedule: {e}")
    except GatewayError as e:
        if e.status_code is not None and e.status_code < 500:
            _fail(str(e))
        _fail(f"{e}\nNothing was lost; run the command again to retry.")
    except (ScheduleError, ValueError, FileNotFoundError) as e:
        _fail(str(e))


def _breaks_display(breaks) -> str:
    return ", ".join(str(b) for b in breaks) or "-"


def _render_template(template: WeeklyTemplate) -> Table:
    table = Table(title="Weekly Template", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Status")
    table.add_column("Hours")
    table.add_column("Slot")
    table.add_column("Breaks", style="dim")

    for day in template.days():
        table.add_row(
            day.day_name,
            "[green]active[/green]" if day.is_active else "[dim]off[/dim]",
            day.window_display(),
            f"{int(day.slot_duration)} min",
            _breaks_display(day.break_times),
        )
    return table


def _render_draft(draft: OverrideDraft) -> str:
    if not draft.is_available:
        return f"{draft.date.isoformat()}: unavailable"
    return (
        f"{draft.date.isoformat()}: {format_time(draft.start_time)} - {format_time(draft.end_time)}, "
        f"{int(draft.slot_duration)} min slots, breaks {_breaks_display(draft.break_times)}"
    )


def _apply_hours(current_start, current_end, start: Optional[str], end: Optional[str]):
    new_start = parse_time(start) if start else current_start
    new_end = parse_time(end) if end else current_end
    return new_start, new_end


@app.command()
def show_template(config_file: ConfigOption = None, mock: MockOption = False):
    """
    Show the weekly template.
    """
    service = _build_service(config_file, mock)
    template = _run(service.load_template())

    console.print()
    console.print(_render_template(template))
    console.print()


@app.command()
def set_day(
    day: Annotated[str, typer.Argument(help="Day name (e.g. 'mon') or 0-6 with Sunday = 0")],
    active: Annotated[Optional[bool], typer.Option("--active/--inactive", help="Accept appointments on this weekday. A day that is already active cannot be switched off.")] = None,
    start: StartOption = None,
    end: EndOption = None,
    slot: SlotOption = None,
    breaks: BreakOption = None,
    clear_breaks: ClearBreaksOption = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Edit one day of the weekly template and save it.

    Examples:

        doctorschedule set-day mon --active --start 09:00 --end 17:00 --break 12:00-13:00

        doctorschedule set-day sat --active --start 10:00 --end 13:00 --slot 60
    """
    dow = _parse_day(day)
    service = _build_service(config_file, mock)

    async def edit_and_save():
        template = await service.load_template()
        current = template.day(dow)

        if active is False and current.is_active:
            raise ScheduleError(
                f"{current.day_name} is active and cannot be switched off: saving the template "
                "only adds or updates active days. Block single dates with "
                "'doctorschedule override DATE --unavailable' instead."
            )

        if active is not None and current.is_active != active:
            template.toggle_day(dow)

        if breaks is not None or clear_breaks:
            while current.break_times:
                template.remove_break(dow, 0)

        if start or end:
            template.set_window(dow, *_apply_hours(current.start_time, current.end_time, start, end))

        if slot is not None:
            template.set_slot_duration(dow, slot)

        for value in breaks or []:
            template.add_break(dow, BreakInterval.parse(value))

        result = await service.save_template(template)
        return template, result

    template, result = _run(edit_and_save())

    console.print(f"[green]✓ {result.message or 'Weekly template saved'}[/green]")
    if not template.day(dow).is_active:
        console.print(f"[yellow]⚠ {DAY_NAMES[dow]} is off, so its changes were not sent. Add --active to save them.[/yellow]")
    console.print(_render_template(template))


@app.command()
def copy_weekdays(
    day: Annotated[str, typer.Argument(help="Source day to copy onto Monday-Friday")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Copy one day's hours, slot size and breaks to every weekday (Mon-Fri) and save.
    """
    dow = _parse_day(day)
    service = _build_service(config_file, mock)

    async def copy_and_save():
        template = await service.load_template()
        targets = template.copy_to_weekdays(dow)
        result = await service.save_template(template)
        return template, targets, result

    template, targets, result = _run(copy_and_save())

    names = ", ".join(DAY_NAMES[t] for t in targets)
    console.print(f"[green]✓ Copied {DAY_NAMES[dow]} to {names}. {result.message}[/green]")
    console.print(_render_template(template))


@app.command()
def override(
    date: Annotated[str, typer.Argument(help="Calendar date (YYYY-MM-DD)")],
    available: Annotated[Optional[bool], typer.Option("--available/--unavailable", help="Open or block this date.")] = None,
    start: StartOption = None,
    end: EndOption = None,
    slot: SlotOption = None,
    breaks: BreakOption = None,
    clear_breaks: ClearBreaksOption = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Customize the schedule of one specific date and save it.

    Examples:

        doctorschedule override 2025-06-10 --start 10:00 --end 14:00

        doctorschedule override 2025-06-12 --unavailable
    """
    target = _parse_date(date)
    service = _build_service(config_file, mock)

    async def edit_and_save():
        draft = await service.open_override(target)

        if available is False:
            draft.set_available(False)

        if breaks is not None or clear_breaks:
            while draft.break_times:
                draft.remove_break(0)

        if start or end:
            draft.set_window(*_apply_hours(draft.start_time, draft.end_time, start, end))

        if slot is not None:
            draft.set_slot_duration(slot)

        for value in breaks or []:
            draft.add_break(BreakInterval.parse(value))

        if available is True:
            draft.set_available(True)

        summary = _render_draft(draft)
        result = await service.save_override()
        return summary, result

    summary, result = _run(edit_and_save())

    console.print(f"[green]✓ {result.message}[/green]")
    console.print(f"  {summary}")
    if result.warning:
        console.print(f"[yellow]⚠ {result.warning}[/yellow]")


@app.command()
def delete_override(
    date: Annotated[str, typer.Argument(help="Calendar date (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Remove the custom schedule of a date so it follows the weekly template again.

    Dates with booked appointments cannot be reset.
    """
    target = _parse_date(date)
    service = _build_service(config_file, mock)

    async def delete_and_resolve():
        result = await service.delete_override(target)
        schedule = await service.resolve_date(target)
        return result, schedule

    result, schedule = _run(delete_and_resolve())

    if result is None:
        console.print(f"[yellow]{target.isoformat()} has no custom schedule.[/yellow]")
    else:
        console.print(f"[green]✓ {result.message}[/green]")
    console.print(f"  {schedule.format_display()}")


def _render_effective(schedules: List[EffectiveSchedule], customized) -> Table:
    table = Table(title="Effective Schedule", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold yellow")
    table.add_column("Day")
    table.add_column("Status")
    table.add_column("Hours")
    table.add_column("Slot")
    table.add_column("Breaks", style="dim")
    table.add_column("Source", style="dim")

    for schedule in schedules:
        marker = " ✎" if schedule.date in customized else ""
        if schedule.is_available:
            status = "[green]available[/green]"
            hours = f"{format_time(schedule.start_time)} - {format_time(schedule.end_time)}"
            slot = f"{int(schedule.slot_duration)} min"
        else:
            status, hours, slot = "[dim]unavailable[/dim]", "-", "-"
        table.add_row(
            schedule.date.isoformat() + marker,
            schedule.date.format("ddd"),
            status,
            hours,
            slot,
            _breaks_display(schedule.break_times),
            schedule.source,
        )
    return table


@app.command()
def resolve(
    date: Annotated[Optional[str], typer.Argument(help="Date to resolve (YYYY-MM-DD). Omit to list upcoming days.")] = None,
    days: Annotated[Optional[int], typer.Option("--days", "-d", help="Number of upcoming days to list")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the effective schedule of a date, or of the upcoming days.
    """
    service = _build_service(config_file, mock)

    if date:
        target = _parse_date(date)
        schedule = _run(service.resolve_date(target))
        console.print()
        console.print(Panel.fit(schedule.format_display(), title=f"Effective schedule ({schedule.source})"))
        console.print()
        return

    async def resolve_upcoming():
        schedules = await service.resolve_upcoming(days)
        customized = await service.refresh_customized_dates()
        return schedules, customized

    schedules, customized = _run(resolve_upcoming())
    console.print()
    console.print(_render_effective(schedules, customized))
    console.print("[dim]✎ = customized date[/dim]\n")


@app.command()
def customized(config_file: ConfigOption = None, mock: MockOption = False):
    """
    List the dates in the rolling horizon that have their own schedule.
    """
    service = _build_service(config_file, mock)
    dates = _run(service.refresh_customized_dates())
    index = service.customized_dates

    console.print(
        f"\n[bold cyan]Customized dates {index.first.isoformat()} - {index.last.isoformat()}:[/bold cyan]"
    )
    if not dates:
        console.print("[yellow]No customized dates in this period.[/yellow]\n")
        return

    for day in sorted(dates):
        console.print(f"  {day.format('dddd')}, {day.isoformat()}")
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]doctorschedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
