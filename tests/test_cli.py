"""
Tests for the operator CLI running in mock mode.
"""

import json

import pytest
from typer.testing import CliRunner

from availabilityplanner import __version__
from availabilityplanner.cli.app import app


runner = CliRunner()


@pytest.fixture
def workspace(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("upcoming_limit: 4\nlog_level: WARNING\n", encoding="utf-8")

    mock_file = tmp_path / "mock.json"
    schedule = [
        {"day_of_week": dow, "is_available": 1 <= dow <= 5, "start_time": "09:00", "end_time": "17:00"}
        for dow in range(7)
    ]
    mock_file.write_text(
        json.dumps({
            "schedule": schedule,
            "assignments": [{"date": "2099-01-05", "label": "Warehouse shift"}],
        }),
        encoding="utf-8",
    )
    return config_file, mock_file


def _invoke(workspace, *args):
    config_file, mock_file = workspace
    return runner.invoke(app, [*args, "--config", str(config_file), "--mock", "--mock-file", str(mock_file)])


def test_template_command(workspace):
    result = _invoke(workspace, "template")

    assert result.exit_code == 0
    assert "Weekly template" in result.output
    assert "Monday" in result.output
    assert "09:00 - 17:00" in result.output


def test_set_day_saves_to_mock_file(workspace):
    _, mock_file = workspace

    result = _invoke(workspace, "set-day", "3", "--disable")

    assert result.exit_code == 0
    assert "Wednesday saved" in result.output
    data = json.loads(mock_file.read_text(encoding="utf-8"))
    assert data["schedule"][3]["is_available"] is False
    assert data["schedule"][1]["start_time"] == "09:00"
    assert data["assignments"][0]["label"] == "Warehouse shift"


def test_set_day_with_new_times(workspace):
    _, mock_file = workspace

    result = _invoke(workspace, "set-day", "6", "--start", "10:00", "--end", "14:00")

    assert result.exit_code == 0
    row = json.loads(mock_file.read_text(encoding="utf-8"))["schedule"][6]
    assert row == {"day_of_week": 6, "is_available": True, "start_time": "10:00", "end_time": "14:00"}


def test_set_day_rejects_inverted_times(workspace):
    result = _invoke(workspace, "set-day", "1", "--start", "17:00", "--end", "09:00")

    assert result.exit_code == 1
    assert "Error" in result.output


def test_set_day_rejects_unknown_weekday(workspace):
    result = _invoke(workspace, "set-day", "9")

    assert result.exit_code == 1


def test_month_command_lists_busy_dates(workspace):
    result = _invoke(workspace, "month", "2099-01")

    assert result.exit_code == 0
    assert "January 2099" in result.output
    assert "2099-01-05" in result.output
    assert "Warehouse shift" in result.output
    assert "projected from the weekly template" in result.output


def test_month_command_rejects_bad_month(workspace):
    result = _invoke(workspace, "month", "2025-13")

    assert result.exit_code == 1
    assert "expected YYYY-MM" in result.output


def test_upcoming_command(workspace):
    result = _invoke(workspace, "upcoming")

    assert result.exit_code == 0
    assert "Next 4 available date(s)" in result.output
    assert "09:00-17:00" in result.output


def test_missing_config_file(tmp_path):
    result = runner.invoke(app, ["template", "--config", str(tmp_path / "nope.yaml"), "--mock"])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
