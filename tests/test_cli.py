"""
Tests for the CLI in mock mode.
"""

from typer.testing import CliRunner

from doctorschedule import __version__
from doctorschedule.cli.app import app

runner = CliRunner()


def _invoke(*args):
    return runner.invoke(app, [*args, "--mock"])


def test_show_template():
    result = _invoke("show-template")

    assert result.exit_code == 0, result.output
    assert "Weekly Template" in result.output
    assert "Wednesday" in result.output
    assert "12:30-13:15" in result.output


def test_set_day_saves_and_prints_template():
    result = _invoke("set-day", "sat", "--active", "--start", "10:00", "--end", "13:00", "--break", "11:00-11:15")

    assert result.exit_code == 0, result.output
    assert "Weekly schedule saved" in result.output
    assert "11:00-11:15" in result.output


def test_set_day_rejects_break_outside_hours():
    result = _invoke("set-day", "mon", "--break", "08:00-09:30")

    assert result.exit_code == 1
    assert "Invalid schedule" in result.output


def test_set_day_rejects_unknown_day():
    result = _invoke("set-day", "funday", "--active")

    assert result.exit_code != 0


def test_set_day_cannot_switch_off_an_active_day():
    """Template saves only carry active days, so switching one off is refused."""
    result = _invoke("set-day", "mon", "--inactive")

    assert result.exit_code == 1
    assert "cannot be switched off" in result.output
    assert "Weekly schedule saved" not in result.output


def test_set_day_inactive_on_a_day_that_is_off():
    result = _invoke("set-day", "sun", "--inactive")

    assert result.exit_code == 0, result.output
    assert "were not sent" in result.output


def test_copy_weekdays():
    result = _invoke("copy-weekdays", "wed")

    assert result.exit_code == 0, result.output
    assert "Copied Wednesday" in result.output


def test_override_with_booked_appointments_shows_warning():
    result = _invoke("override", "2026-10-27", "--start", "10:00", "--end", "16:00")

    assert result.exit_code == 0, result.output
    assert "Availability set successfully" in result.output
    assert "appointment(s)" in result.output


def test_override_updates_existing_record():
    result = _invoke("override", "2026-10-22", "--available")

    assert result.exit_code == 0, result.output
    assert "Availability updated successfully" in result.output


def test_delete_override_returns_date_to_template():
    result = _invoke("delete-override", "2026-10-24")

    assert result.exit_code == 0, result.output
    assert "Availability deleted successfully" in result.output
    assert "unavailable" in result.output


def test_delete_override_without_custom_schedule():
    result = _invoke("delete-override", "2026-10-27")

    assert result.exit_code == 0, result.output
    assert "has no custom schedule" in result.output


def test_resolve_single_date():
    result = _invoke("resolve", "2026-10-22")

    assert result.exit_code == 0, result.output
    assert "unavailable" in result.output
    assert "override" in result.output


def test_resolve_upcoming_days():
    result = _invoke("resolve", "--days", "7")

    assert result.exit_code == 0, result.output
    assert "Effective Schedule" in result.output


def test_customized():
    result = _invoke("customized")

    assert result.exit_code == 0, result.output
    assert "Customized dates" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
