"""Core domain types and planning algorithms."""

from .catalog import DEFAULT_CATALOG, ControllerCatalog, load_catalog
from .config import LayoutConfig, PlannerConfig, load_config
from .models import (
    PIXEL_LIMIT_PER_PORT,
    CabinetGrid,
    CablePath,
    Controller,
    ControllerSelection,
    ControllerType,
    EdgeKind,
    GridCell,
    HubGroup,
    NodeKind,
    PathStyle,
    PowerRun,
    Product,
    WiringEdge,
    WiringGraph,
    WiringNode,
    Workload,
)
from .partition import (
    balance_groups,
    hub_assignments,
    max_cabinets_per_run,
    partition_hubs,
    partition_power_runs,
)
from .selector import select_controller, select_for_grid
from .traversal import order, row_major_cells, serpentine_cells

__all__ = [
    # models
    "PIXEL_LIMIT_PER_PORT",
    "CabinetGrid",
    "CablePath",
    "Controller",
    "ControllerSelection",
    "ControllerType",
    "EdgeKind",
    "GridCell",
    "HubGroup",
    "NodeKind",
    "PathStyle",
    "PowerRun",
    "Product",
    "WiringEdge",
    "WiringGraph",
    "WiringNode",
    "Workload",
    # config / catalog
    "LayoutConfig",
    "PlannerConfig",
    "load_config",
    "DEFAULT_CATALOG",
    "ControllerCatalog",
    "load_catalog",
    # algorithms
    "select_controller",
    "select_for_grid",
    "order",
    "row_major_cells",
    "serpentine_cells",
    "balance_groups",
    "hub_assignments",
    "max_cabinets_per_run",
    "partition_hubs",
    "partition_power_runs",
]
