"""
Tests for the Typer CLI.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from coworkbooking.cli.app import app

runner = CliRunner()

CONFIG = """
timezone: America/Mexico_City
defaults:
  currency: MXN
spaces:
  - id: sala-a
    name: Sala A
    capacity: 8
    hourly_rate: 100
    min_booking_minutes: 60
services:
  - id: printing
    name: Printing
    price: 2.50
    pricing_tiers:
      - min_quantity: 1
      - min_quantity: 100
        discount_type: PERCENTAGE
        discount: 20
"""


@pytest.fixture
def config_path(tmp_path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_recurrence_without_config(tmp_path):
    """Recurrence previews work on defaults when no config file exists."""
    result = runner.invoke(app, [
        "recurrence",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--repeat", "WEEKLY",
        "--count", "3",
        "--config", str(tmp_path / "missing.yaml"),
    ])

    assert result.exit_code == 0
    assert "02.12.2024 10:00" in result.output
    assert "09.12.2024 10:00" in result.output
    assert "16.12.2024" not in result.output


def test_recurrence_until_and_count_conflict(tmp_path):
    result = runner.invoke(app, [
        "recurrence",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--until", "2024-12-31",
        "--count", "3",
        "--config", str(tmp_path / "missing.yaml"),
    ])

    assert result.exit_code == 1
    assert "cannot be used together" in result.output


def test_recurrence_max_preview_zero(tmp_path):
    """An explicit zero cap shows no dates instead of the configured default."""
    result = runner.invoke(app, [
        "recurrence",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--repeat", "DAILY",
        "--max-preview", "0",
        "--config", str(tmp_path / "missing.yaml"),
    ])

    assert result.exit_code == 0
    assert "No further occurrences" in result.output
    assert "26.11.2024" not in result.output


def test_recurrence_defaults_to_weekly(tmp_path):
    """Without --repeat the preview uses a weekly rule."""
    result = runner.invoke(app, [
        "recurrence",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--count", "2",
        "--config", str(tmp_path / "missing.yaml"),
    ])

    assert result.exit_code == 0
    assert "Repeats every week" in result.output
    assert "02.12.2024 10:00" in result.output


def test_evaluate_valid_booking(config_path):
    result = runner.invoke(app, [
        "evaluate", "sala-a",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--setup", "15",
        "--cleanup", "15",
        "--config", str(config_path),
    ])

    assert result.exit_code == 0
    assert "250.00 MXN" in result.output
    assert "2h 0m" in result.output


def test_evaluate_reports_violations(config_path):
    """Rule violations are listed and signalled with exit code 2."""
    result = runner.invoke(app, [
        "evaluate", "sala-a",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 10:30",
        "--attendees", "9",
        "--config", str(config_path),
    ])

    assert result.exit_code == 2
    assert "Minimum booking duration is 60 minutes" in result.output
    assert "Space capacity is 8 people" in result.output


def test_evaluate_unknown_space(config_path):
    result = runner.invoke(app, [
        "evaluate", "nope",
        "--start", "2024-11-25 10:00",
        "--end", "2024-11-25 12:00",
        "--config", str(config_path),
    ])

    assert result.exit_code == 1
    assert "Unknown space" in result.output


def test_price_applies_tier(config_path):
    result = runner.invoke(app, ["price", "printing", "100", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "2.00 MXN" in result.output
    assert "200.00 MXN" in result.output


def test_list_spaces(config_path):
    result = runner.invoke(app, ["list-spaces", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "sala-a" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
