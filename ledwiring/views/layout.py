"""
Fixed-pitch placement of hubs, cabinets and backup corridors.

Coordinates follow the rendering layer's convention: x grows right, y grows
down, node positions are top-left corners.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.config import LayoutConfig
from ..core.models import GridCell
from .geometry import Rect, bounding_rect


def hub_color(index: int, total: int) -> str:
    """Evenly spaced hue per hub so neighbouring groups stay distinguishable."""
    hue = (index * 360 / total) if total else 0
    return f"hsl({hue:g}, 70%, 50%)"


@dataclass(frozen=True)
class WallLayout:
    config: LayoutConfig
    columns: int
    rows: int

    @property
    def grid_right(self) -> float:
        c = self.config
        if self.columns == 0:
            return c.cabinet_origin_x
        return c.cabinet_origin_x + (self.columns - 1) * c.cabinet_spacing_x + c.cabinet_width

    def cabinet_rect(self, cell: GridCell) -> Rect:
        c = self.config
        return Rect(
            c.cabinet_origin_x + cell.column * c.cabinet_spacing_x,
            c.cabinet_origin_y + cell.row * c.cabinet_spacing_y,
            c.cabinet_width,
            c.cabinet_height,
        )

    def hub_rect(self, index: int) -> Rect:
        c = self.config
        return Rect(c.hub_origin_x, c.hub_origin_y + index * c.hub_spacing_y, c.hub_width, c.hub_height)

    def hub_lane_x(self, index: int) -> float:
        return self.hub_rect(index).right + self.config.hub_bend_offset

    def row_top(self, row: int) -> float:
        return self.config.cabinet_origin_y + row * self.config.cabinet_spacing_y

    def row_bottom(self, row: int) -> float:
        return self.row_top(row) + self.config.cabinet_height

    def gap_above(self, row: int) -> float:
        """Middle of the gap above a row; half a row pitch above row 0."""
        if row > 0:
            return (self.row_bottom(row - 1) + self.row_top(row)) / 2
        return self.row_top(0) - self.config.cabinet_spacing_y / 2

    def wrap_level(self, row: int) -> float:
        """Level of power cables wrapping from this row to the next."""
        return self.row_bottom(row) + self.config.power_wrap_offset

    def corridor_x(self, index: int) -> float:
        c = self.config
        return self.grid_right + c.corridor_margin + (index % c.corridor_count) * c.corridor_spacing

    def backup_hub_rect(self, index: int) -> Rect:
        c = self.config
        x = self.grid_right + c.corridor_margin + (c.corridor_count - 1) * c.corridor_spacing + c.backup_hub_gap
        return Rect(x, c.hub_origin_y + index * c.hub_spacing_y, c.hub_width, c.hub_height)

    def group_bounds(self, rects: Iterable[Rect]) -> Optional[Rect]:
        box = bounding_rect(rects)
        if box is None:
            return None
        px, py = self.config.group_padding_x, self.config.group_padding_y
        return box.padded(px, py, px, py)
