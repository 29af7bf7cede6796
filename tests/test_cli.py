"""
Tests for the Typer command-line interface.
"""

import pytest
from typer.testing import CliRunner

from salonslots import __version__
from salonslots.adapters.json_store import DEFAULT_DATA_FILE
from salonslots.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "store:\n"
        "  backend: json\n"
        f"  data_file: {DEFAULT_DATA_FILE.as_posix()}\n",
        encoding="utf-8",
    )
    return path


def test_slots_command(config_file):
    result = runner.invoke(
        app, ["slots", "studio-bella", "s-corte", "e-ana", "--date", "2025-03-10", "--config", str(config_file)]
    )

    assert result.exit_code == 0
    assert "16 available slot(s)" in result.output
    assert "13:00" in result.output


def test_slots_command_without_shifts(config_file):
    # Carla does not work on Tuesdays
    result = runner.invoke(
        app, ["slots", "studio-bella", "s-corte", "e-carla", "--date", "2025-03-11", "--config", str(config_file)]
    )

    assert result.exit_code == 0
    assert "No available slots" in result.output


def test_slots_command_unknown_tenant(config_file):
    result = runner.invoke(
        app, ["slots", "nope", "s-corte", "e-ana", "--date", "2025-03-10", "--config", str(config_file)]
    )

    assert result.exit_code == 1
    assert "Unknown tenant" in result.output


def test_slots_command_invalid_date(config_file):
    result = runner.invoke(
        app, ["slots", "studio-bella", "s-corte", "e-ana", "--date", "10/03/2025", "--config", str(config_file)]
    )

    assert result.exit_code == 1


def test_missing_config_file(tmp_path):
    result = runner.invoke(app, ["tenants", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_follow_up_command(config_file):
    result = runner.invoke(
        app,
        ["follow-up", "studio-bella", "s-escova", "e-ana", "09:00", "--date", "2025-03-11", "--config", str(config_file)],
    )

    assert result.exit_code == 0
    assert "Corte Feminino" in result.output
    assert "09:45" in result.output


def test_tenants_command(config_file):
    result = runner.invoke(app, ["tenants", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "studio-bella" in result.output
    assert "espaco-zen" in result.output


def test_services_and_staff_commands(config_file):
    services = runner.invoke(app, ["services", "studio-bella", "--config", str(config_file)])
    staff = runner.invoke(app, ["staff", "espaco-zen", "--config", str(config_file)])

    assert services.exit_code == 0
    assert "s-corte" in services.output
    assert staff.exit_code == 0
    assert "e-paulo" in staff.output


def test_commissions_command(config_file):
    result = runner.invoke(app, ["commissions", "studio-bella", "--config", str(config_file)])

    assert result.exit_code == 0
    assert "157.60" in result.output
    assert "47.28" in result.output


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
