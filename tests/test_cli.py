"""Tests for the ledwiring command line."""

import json
import logging

import pytest

from ledwiring.cli import main


@pytest.fixture(autouse=True)
def reset_logging():
    """main() installs handlers on the captured stderr; drop them afterwards."""
    yield
    logger = logging.getLogger("ledwiring")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_controllers(capsys):
    assert main(["controllers"]) == 0
    out = capsys.readouterr().out
    assert "# Controllers (8)" in out
    assert "`4K Prime`" in out


def test_select_json(capsys):
    assert main(["select", "3", "1500000", "--redundancy", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["controller"]["id"] == "vx600"
    assert data["required_ports"] == 6
    assert data["backup_ports"] == 3


def test_select_markdown_reports_exceeded(capsys):
    assert main(["select", "20", "1000"]) == 0
    out = capsys.readouterr().out
    assert "# Controller: 4K Prime" in out
    assert "Exceeds capacity" in out


def test_plan_json(capsys):
    assert main(["plan", "-c", "5", "-R", "1", "--resolution", "500x400", "--pitch", "2.5", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["selection"]["controller"]["id"] == "tb40"
    assert [g["cabinets"] for g in data["hub_groups"]] == [[1, 2], [3, 4, 5]]


def test_plan_markdown_from_display(capsys):
    assert main(["plan", "--display", "1800x675", "--pitch", "1.5625", "--redundancy"]) == 0
    out = capsys.readouterr().out
    assert "# Wiring plan: Custom (3x2)" in out
    assert "**Data Hubs:**" in out
    assert "backup feeds" in out


def test_plan_with_config_and_catalog(tmp_path, capsys):
    config = tmp_path / "planner.yaml"
    config.write_text("pixel_limit_per_port: 400000\n", encoding="utf-8")
    catalog = tmp_path / "controllers.yaml"
    catalog.write_text(
        "controllers:\n"
        "  - id: house\n"
        "    name: House\n"
        "    port_count: 4\n"
        "    pixel_capacity: 2.0\n",
        encoding="utf-8",
    )
    code = main(
        ["--catalog", str(catalog), "plan", "-c", "4", "-R", "1", "--resolution", "500x400", "-p", "2.5", "--config", str(config), "-j"]
    )
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["selection"]["controller"]["id"] == "house"
    assert len(data["hub_groups"]) == 2


def test_plan_without_grid_is_an_error(capsys):
    assert main(["plan", "--pitch", "2.5"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_bad_catalog_is_an_error(tmp_path, capsys):
    assert main(["--catalog", str(tmp_path / "missing.yaml"), "controllers"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_verbose_log_file(tmp_path, capsys):
    log_file = tmp_path / "run.log"
    assert main(["-v", "--log-file", str(log_file), "select", "1", "1000"]) == 0
    capsys.readouterr()
    logging.getLogger("ledwiring").handlers[-1].flush()
    assert "Selected TB2" in log_file.read_text(encoding="utf-8")
