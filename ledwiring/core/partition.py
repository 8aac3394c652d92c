"""
Cabinet partitioning.

Data hubs: walk the serpentine order, cut a new hub group whenever the next
cabinet would push the group past the per-port pixel limit, then run a single
left-to-right balancing sweep over adjacent groups.

Power runs: walk the row-major order and cut every N cabinets, where N comes
from the product's pixel pitch. Power runs are never rebalanced.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence

from ..errors import ValidationError
from .config import DEFAULT_RUN_LENGTH, POWER_RUN_LENGTHS
from .models import PIXEL_LIMIT_PER_PORT, HubGroup, PowerRun

logger = logging.getLogger(__name__)


def _greedy_cut(order: Sequence[int], pixels_per_cabinet: int, pixel_limit_per_port: int) -> List[List[int]]:
    groups: List[List[int]] = []
    current: List[int] = []
    cumulative = 0
    for cabinet in order:
        # The limit is checked when closing a group; a lone oversized cabinet stays whole
        if current and cumulative + pixels_per_cabinet > pixel_limit_per_port:
            groups.append(current)
            current = []
            cumulative = 0
        current.append(cabinet)
        cumulative += pixels_per_cabinet
    if current:
        groups.append(current)
    return groups


def _balance(groups: List[List[int]], pixels_per_cabinet: int, pixel_limit_per_port: int) -> List[List[int]]:
    if len(groups) <= 1 or pixels_per_cabinet <= 0:
        return groups

    max_cabs_per_hub = pixel_limit_per_port // pixels_per_cabinet
    out = [list(g) for g in groups]
    for i in range(len(out) - 1):
        left, right = out[i], out[i + 1]
        desired_right = min(max_cabs_per_hub, math.ceil((len(left) + len(right)) / 2))
        if len(right) < desired_right and len(left) > 1:
            shift = min(desired_right - len(right), len(left) - 1)
            out[i] = left[:-shift]
            out[i + 1] = left[-shift:] + right
            logger.debug("Balanced hub %d -> %d: moved %d cabinet(s)", i, i + 1, shift)
    return out


def _to_groups(groups: List[List[int]], pixels_per_cabinet: int) -> List[HubGroup]:
    return [HubGroup(index=i, cabinets=tuple(g), pixels_per_cabinet=pixels_per_cabinet) for i, g in enumerate(groups)]


def balance_groups(
    groups: Sequence[HubGroup],
    pixel_limit_per_port: int = PIXEL_LIMIT_PER_PORT,
) -> List[HubGroup]:
    """Shift tail cabinets of fuller left groups into emptier right neighbours.

    One forward sweep only; a shift never propagates back and never grows a
    group past floor(limit / pixels_per_cabinet) cabinets.
    """
    if not groups:
        return []
    pixels = groups[0].pixels_per_cabinet
    raw = _balance([list(g.cabinets) for g in groups], pixels, pixel_limit_per_port)
    return _to_groups(raw, pixels)


def partition_hubs(
    order: Sequence[int],
    pixels_per_cabinet: int,
    pixel_limit_per_port: int = PIXEL_LIMIT_PER_PORT,
    balance: bool = True,
) -> List[HubGroup]:
    """Split a traversal into hub groups bounded by the per-port pixel limit."""
    if pixels_per_cabinet < 0:
        raise ValidationError("pixels_per_cabinet must be non-negative")
    if pixel_limit_per_port <= 0:
        raise ValidationError("pixel_limit_per_port must be positive")

    raw = _greedy_cut(order, pixels_per_cabinet, pixel_limit_per_port)
    if balance:
        raw = _balance(raw, pixels_per_cabinet, pixel_limit_per_port)
    return _to_groups(raw, pixels_per_cabinet)


def hub_assignments(groups: Sequence[HubGroup]) -> Dict[int, int]:
    """Cabinet id -> hub index."""
    return {cabinet: g.index for g in groups for cabinet in g.cabinets}


def max_cabinets_per_run(
    pixel_pitch: float,
    table: Optional[Mapping[float, int]] = None,
    default: int = DEFAULT_RUN_LENGTH,
) -> int:
    """Cabinets one power cable may feed, looked up by pixel pitch."""
    lengths = POWER_RUN_LENGTHS if table is None else table
    for pitch, length in lengths.items():
        if math.isclose(pitch, pixel_pitch, rel_tol=1e-9, abs_tol=1e-6):
            return length
    logger.debug("No power run length for pitch %s, using default %d", pixel_pitch, default)
    return default


def partition_power_runs(order: Sequence[int], max_cabinets_per_run: int) -> List[PowerRun]:
    if max_cabinets_per_run < 1:
        raise ValidationError("max_cabinets_per_run must be at least 1")
    return [
        PowerRun(index=i, cabinets=tuple(order[start : start + max_cabinets_per_run]))
        for i, start in enumerate(range(0, len(order), max_cabinets_per_run))
    ]
