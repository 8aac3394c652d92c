"""
Wall planning pipeline.

plan_wall() runs every stage in order and returns one immutable WallPlan:

    workload -> controller selection
    serpentine cells -> hub groups -> data graph
    row-major cells  -> power runs -> power graph

Any input change means calling plan_wall() again; nothing is updated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .catalog import ControllerCatalog
from .config import PlannerConfig
from .models import (
    CabinetGrid,
    ControllerSelection,
    GridCell,
    HubGroup,
    PowerRun,
    Product,
    WiringGraph,
    Workload,
)
from .partition import hub_assignments, max_cabinets_per_run, partition_hubs, partition_power_runs
from .routing import RoutingPlanner
from .selector import select_controller
from .traversal import row_major_cells, serpentine_cells

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WallPlan:
    product: Product
    grid: CabinetGrid
    redundancy: bool
    workload: Workload
    selection: ControllerSelection
    data_cells: Tuple[GridCell, ...]
    power_cells: Tuple[GridCell, ...]
    hub_groups: Tuple[HubGroup, ...]
    power_runs: Tuple[PowerRun, ...]
    run_length: int
    data_graph: WiringGraph = field(compare=False)
    power_graph: WiringGraph = field(compare=False)
    warnings: Tuple[str, ...] = ()

    @property
    def hub_assignments(self) -> Dict[int, int]:
        return hub_assignments(self.hub_groups)

    @property
    def total_hubs(self) -> int:
        return len(self.hub_groups)

    def summary(self) -> Dict[str, object]:
        ctrl = self.selection.selected_controller
        return {
            "product": self.product.name,
            "grid": f"{self.grid.columns}x{self.grid.rows}",
            "cabinets": self.grid.cabinet_count,
            "total_pixels": self.workload.total_pixels,
            "data_hub_ports": self.workload.data_hub_ports,
            "redundancy": self.redundancy,
            "controller": ctrl.name,
            "required_ports": self.selection.required_ports,
            "backup_ports": self.selection.backup_ports,
            "capacity_exceeded": self.selection.capacity_exceeded,
            "hub_groups": [list(g.cabinets) for g in self.hub_groups],
            "power_runs": [list(r.cabinets) for r in self.power_runs],
            "run_length": self.run_length,
            "warnings": list(self.warnings),
        }


def plan_wall(
    product: Product,
    grid: CabinetGrid,
    redundancy: bool = False,
    config: Optional[PlannerConfig] = None,
    catalog: Optional[ControllerCatalog] = None,
) -> WallPlan:
    """Compute controller selection, partitions and cable routes for a wall."""
    cfg = config or PlannerConfig()
    warnings: List[str] = []

    workload = Workload.for_grid(grid, product, redundancy, cfg.pixel_limit_per_port)
    selection = select_controller(
        workload.data_hub_ports,
        workload.total_pixels,
        workload.is_redundancy_mode,
        catalog=catalog,
    )
    if selection.capacity_exceeded:
        ctrl = selection.selected_controller
        warnings.append(
            f"Exceeds capacity: {selection.demanded_ports} ports / {workload.total_pixels:,} pixels "
            f"needed, {ctrl.name} offers {ctrl.port_count} ports / {ctrl.pixel_capacity_pixels:,.0f} pixels"
        )

    pixels = product.pixels_per_cabinet
    if pixels > cfg.pixel_limit_per_port and not grid.is_empty:
        warnings.append(
            f"One cabinet ({pixels:,} pixels) exceeds the per-port limit of "
            f"{cfg.pixel_limit_per_port:,}; each cabinet gets its own hub"
        )

    data_cells = serpentine_cells(grid.columns, grid.rows)
    groups = partition_hubs(
        [c.cabinet_id for c in data_cells],
        pixels,
        pixel_limit_per_port=cfg.pixel_limit_per_port,
    )

    power_cells = row_major_cells(grid.columns, grid.rows)
    run_length = max_cabinets_per_run(product.pixel_pitch, cfg.power_run_lengths, cfg.default_run_length)
    runs = partition_power_runs([c.cabinet_id for c in power_cells], run_length)

    router = RoutingPlanner(cfg.layout)
    data_graph = router.route_data(data_cells, groups, redundancy=redundancy)
    power_graph = router.route_power(power_cells, runs)

    logger.info(
        "Planned %s %dx%d: %d hub(s), %d power run(s), controller %s",
        product.name,
        grid.columns,
        grid.rows,
        len(groups),
        len(runs),
        selection.selected_controller.name,
    )
    for w in warnings:
        logger.warning(w)

    return WallPlan(
        product=product,
        grid=grid,
        redundancy=redundancy,
        workload=workload,
        selection=selection,
        data_cells=tuple(data_cells),
        power_cells=tuple(power_cells),
        hub_groups=tuple(groups),
        power_runs=tuple(runs),
        run_length=run_length,
        data_graph=data_graph,
        power_graph=power_graph,
        warnings=tuple(warnings),
    )
