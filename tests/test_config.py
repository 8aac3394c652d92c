"""Tests for planner configuration and YAML overrides."""

import pytest

from ledwiring.core.config import (
    DEFAULT_RUN_LENGTH,
    POWER_RUN_LENGTHS,
    LayoutConfig,
    PlannerConfig,
    config_from_dict,
    load_config,
)
from ledwiring.core.models import PIXEL_LIMIT_PER_PORT
from ledwiring.errors import ConfigError
from ledwiring.views.layout import WallLayout


def test_defaults():
    cfg = PlannerConfig()
    assert cfg.pixel_limit_per_port == PIXEL_LIMIT_PER_PORT
    assert cfg.default_run_length == DEFAULT_RUN_LENGTH
    assert cfg.power_run_lengths == POWER_RUN_LENGTHS
    assert cfg.layout.row_gap == 40
    assert cfg.layout.power_wrap_offset == 10


def test_overrides_merge_run_lengths():
    cfg = config_from_dict({"pixel_limit_per_port": 500_000, "power_run_lengths": {"2.5": 10}})
    assert cfg.pixel_limit_per_port == 500_000
    assert cfg.power_run_lengths[2.5] == 10
    assert cfg.power_run_lengths[4.0] == 4


def test_layout_overrides_keep_other_fields():
    cfg = config_from_dict({"layout": {"corridor_count": 2, "hub_origin_x": 10}})
    assert cfg.layout.corridor_count == 2
    assert cfg.layout.hub_origin_x == 10
    assert cfg.layout.cabinet_width == LayoutConfig().cabinet_width


def test_unknown_keys_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"pixel_limit": 1})
    with pytest.raises(ConfigError):
        config_from_dict({"layout": {"hub_colour": 1}})


def test_invalid_values_rejected():
    with pytest.raises(ConfigError):
        config_from_dict({"pixel_limit_per_port": 0})
    with pytest.raises(ConfigError):
        config_from_dict({"pixel_limit_per_port": "lots"})
    with pytest.raises(ConfigError):
        config_from_dict({"layout": {"corridor_spacing": "wide"}})
    with pytest.raises(ConfigError):
        config_from_dict({"power_run_lengths": {"2.5": 0}})


def test_layout_validation():
    with pytest.raises(ConfigError):
        LayoutConfig(corridor_count=0)
    with pytest.raises(ConfigError):
        LayoutConfig(cabinet_spacing_x=100)
    with pytest.raises(ConfigError):
        LayoutConfig(backup_row_offset=20)
    with pytest.raises(ConfigError):
        LayoutConfig(power_wrap_offset=0)
    with pytest.raises(ConfigError):
        LayoutConfig(power_wrap_offset=20)
    with pytest.raises(ConfigError):
        LayoutConfig(hub_spacing_y=100)


def test_corridors_wrap_at_corridor_count():
    layout = WallLayout(LayoutConfig(corridor_count=2), columns=5, rows=3)
    assert layout.corridor_x(2) == layout.corridor_x(0)
    assert layout.corridor_x(3) == layout.corridor_x(1)
    assert layout.corridor_x(1) - layout.corridor_x(0) == 20


def test_load_config_yaml(tmp_path):
    path = tmp_path / "planner.yaml"
    path.write_text(
        "pixel_limit_per_port: 600000\n"
        "default_run_length: 12\n"
        "layout:\n"
        "  backup_row_offset: 5\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.pixel_limit_per_port == 600_000
    assert cfg.default_run_length == 12
    assert cfg.layout.backup_row_offset == 5


def test_load_config_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("layout: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)

    listy = tmp_path / "list.yaml"
    listy.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(listy)


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PlannerConfig()
