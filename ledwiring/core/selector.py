"""
Controller selection.

Picks the smallest controller (by port count) that can drive the data-hub
ports of a wall, doubling the port demand when every port needs a mirrored
backup. Running out of catalog is reported on the selection, never raised.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import CatalogError, ValidationError
from .catalog import DEFAULT_CATALOG, ControllerCatalog
from .config import PlannerConfig
from .models import CabinetGrid, Controller, ControllerSelection, Product, Workload

logger = logging.getLogger(__name__)


def _pixel_fallback(candidates, required_ports: int, total_pixels: int) -> Optional[Controller]:
    """Smallest pixel-capable controller, preferring ones that also have the ports."""
    pixel_capable = [c for c in candidates if c.pixel_capacity_pixels >= total_pixels]
    if not pixel_capable:
        return None
    both = [c for c in pixel_capable if c.port_count >= required_ports]
    pool = both or pixel_capable
    return min(pool, key=lambda c: (c.port_count, c.pixel_capacity))


def select_controller(
    data_hub_ports: int,
    total_pixels: int,
    is_redundancy_mode: bool,
    catalog: Optional[ControllerCatalog] = None,
) -> ControllerSelection:
    """Select the controller for a workload.

    Args:
        data_hub_ports: Primary data-hub ports the wall needs.
        total_pixels: Pixels across the whole wall.
        is_redundancy_mode: Mirror every primary port with a backup port.
        catalog: Controller table; defaults to the built-in catalog.
    """
    if data_hub_ports < 0 or total_pixels < 0:
        raise ValidationError("data_hub_ports and total_pixels must be non-negative")

    catalog = catalog or DEFAULT_CATALOG

    if is_redundancy_mode:
        required_ports = data_hub_ports * 2
        backup_ports = data_hub_ports
    else:
        required_ports = data_hub_ports
        backup_ports = 0

    candidates = catalog.candidates(is_redundancy_mode)
    if not candidates:
        raise CatalogError("No controller in the catalog supports redundancy")

    port_match = next((c for c in candidates if c.port_count >= required_ports), None)

    if port_match is not None:
        chosen = port_match
        if total_pixels > port_match.pixel_capacity_pixels:
            chosen = _pixel_fallback(candidates, required_ports, total_pixels) or port_match
        exceeded = not chosen.handles(required_ports, total_pixels)
        if exceeded:
            logger.warning(
                "Controller %s cannot cover %d ports / %d pixels",
                chosen.name,
                required_ports,
                total_pixels,
            )
        else:
            logger.debug("Selected %s for %d ports / %d pixels", chosen.name, required_ports, total_pixels)
        return ControllerSelection(
            selected_controller=chosen,
            required_ports=required_ports,
            backup_ports=backup_ports,
            data_hub_ports=data_hub_ports,
            total_pixels=total_pixels,
            is_redundancy_mode=is_redundancy_mode,
            demanded_ports=required_ports,
            capacity_exceeded=exceeded,
        )

    # Nothing has enough ports: best effort with the biggest controller
    fallback = max(candidates, key=lambda c: (c.pixel_capacity, c.port_count))
    logger.warning(
        "No controller offers %d ports; falling back to %s (%d ports)",
        required_ports,
        fallback.name,
        fallback.port_count,
    )
    return ControllerSelection(
        selected_controller=fallback,
        required_ports=fallback.port_count,
        backup_ports=backup_ports,
        data_hub_ports=data_hub_ports,
        total_pixels=total_pixels,
        is_redundancy_mode=is_redundancy_mode,
        demanded_ports=required_ports,
        capacity_exceeded=True,
    )


def select_for_grid(
    grid: CabinetGrid,
    product: Product,
    is_redundancy_mode: bool = False,
    config: Optional[PlannerConfig] = None,
    catalog: Optional[ControllerCatalog] = None,
) -> ControllerSelection:
    cfg = config or PlannerConfig()
    workload = Workload.for_grid(grid, product, is_redundancy_mode, cfg.pixel_limit_per_port)
    return select_controller(
        workload.data_hub_ports,
        workload.total_pixels,
        workload.is_redundancy_mode,
        catalog=catalog,
    )
