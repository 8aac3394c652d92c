"""Planner configuration.

Centralizes the protocol limit, the power-run length policy and the layout
pitch used by the routing planner, and loads overrides from YAML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import ConfigError
from .models import PIXEL_LIMIT_PER_PORT

logger = logging.getLogger(__name__)

DEFAULT_RUN_LENGTH = 25

# Pixel pitch (mm) -> cabinets per power run
POWER_RUN_LENGTHS: Dict[float, int] = {
    0.9: 25,
    0.9375: 25,
    1.25: 25,
    1.5: 25,
    1.5625: 25,
    1.8: 25,
    2.5: 25,
    3.0: 35,
    4.0: 4,
    6.6: 4,
    10.0: 4,
}


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed-pitch 2-D layout. Positions are node top-left corners."""

    hub_origin_x: float = 50
    hub_origin_y: float = 50
    hub_spacing_y: float = 220
    hub_width: float = 160
    hub_height: float = 120

    cabinet_origin_x: float = 350
    cabinet_origin_y: float = 150
    cabinet_spacing_x: float = 140
    cabinet_spacing_y: float = 120
    cabinet_width: float = 112
    cabinet_height: float = 80

    # Distance from a hub's east port to its elbow lane
    hub_bend_offset: float = 40

    # Backup corridors, to the right of the cabinet grid
    corridor_count: int = 4
    corridor_spacing: float = 20
    corridor_margin: float = 40
    backup_hub_gap: float = 60
    backup_row_offset: float = 10
    # Power row wraps, below the row they leave
    power_wrap_offset: float = 10

    group_padding_x: float = 30
    group_padding_y: float = 20

    def __post_init__(self):
        if self.corridor_count < 1:
            raise ConfigError("layout.corridor_count must be at least 1")
        if self.cabinet_spacing_x <= self.cabinet_width or self.cabinet_spacing_y <= self.cabinet_height:
            raise ConfigError("layout: cabinet spacing must exceed cabinet size")
        if self.hub_spacing_y <= self.hub_height:
            raise ConfigError("layout: hub spacing must exceed hub height")
        if self.corridor_spacing <= 0 or self.corridor_margin <= 0:
            raise ConfigError("layout: corridor spacing and margin must be positive")
        row_gap = self.cabinet_spacing_y - self.cabinet_height
        if not 0 < self.backup_row_offset < row_gap / 2:
            raise ConfigError("layout.backup_row_offset must lie inside half the row gap")
        if not 0 < self.power_wrap_offset < row_gap / 2:
            raise ConfigError("layout.power_wrap_offset must lie inside half the row gap")

    @property
    def row_gap(self) -> float:
        return self.cabinet_spacing_y - self.cabinet_height


@dataclass(frozen=True)
class PlannerConfig:
    pixel_limit_per_port: int = PIXEL_LIMIT_PER_PORT
    default_run_length: int = DEFAULT_RUN_LENGTH
    power_run_lengths: Dict[float, int] = field(default_factory=lambda: dict(POWER_RUN_LENGTHS))
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    def __post_init__(self):
        if self.pixel_limit_per_port <= 0:
            raise ConfigError("pixel_limit_per_port must be positive")
        if self.default_run_length < 1:
            raise ConfigError("default_run_length must be at least 1")
        for pitch, length in self.power_run_lengths.items():
            if pitch <= 0 or length < 1:
                raise ConfigError(f"power_run_lengths: invalid entry {pitch}: {length}")


def _layout_from_dict(data: Dict[str, Any]) -> LayoutConfig:
    known = {f.name: f for f in fields(LayoutConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown layout keys: {', '.join(unknown)}")
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"layout.{key} must be a number, got {value!r}")
        kwargs[key] = int(value) if key == "corridor_count" else float(value)
    return LayoutConfig(**kwargs)


def config_from_dict(data: Dict[str, Any], base: Optional[PlannerConfig] = None) -> PlannerConfig:
    """Apply a mapping of overrides on top of base (or the defaults)."""
    cfg = base or PlannerConfig()
    allowed = {"pixel_limit_per_port", "default_run_length", "power_run_lengths", "layout"}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    changes: Dict[str, Any] = {}
    try:
        if "pixel_limit_per_port" in data:
            changes["pixel_limit_per_port"] = int(data["pixel_limit_per_port"])
        if "default_run_length" in data:
            changes["default_run_length"] = int(data["default_run_length"])
        if "power_run_lengths" in data:
            table = data["power_run_lengths"] or {}
            if not isinstance(table, dict):
                raise ConfigError("power_run_lengths must be a mapping of pitch -> cabinets")
            merged = dict(cfg.power_run_lengths)
            merged.update({float(k): int(v) for k, v in table.items()})
            changes["power_run_lengths"] = merged
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config value: {e}") from e

    if "layout" in data:
        layout_data = data["layout"] or {}
        if not isinstance(layout_data, dict):
            raise ConfigError("layout must be a mapping")
        current = {f.name: getattr(cfg.layout, f.name) for f in fields(LayoutConfig)}
        current.update(layout_data)
        changes["layout"] = _layout_from_dict(current)

    return replace(cfg, **changes)


def load_config(path: Union[str, Path]) -> PlannerConfig:
    """Load planner overrides from a YAML file."""
    import yaml

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    cfg = config_from_dict(data)
    logger.debug("Loaded planner config from %s", path)
    return cfg
