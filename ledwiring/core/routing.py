"""
Cable routing for data and power wiring.

Turns partitions into a WiringGraph: one node per hub, backup hub, power feed
and cabinet, and one edge per cable with an orthogonal path on the layout
grid. The graph is rebuilt from scratch on every call.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..views.geometry import (
    Point,
    Rect,
    elbow_path,
    polyline_crossings,
    polylines_overlap,
    ports,
    route_via_outer_lane,
    step_path,
)
from ..views.layout import WallLayout, hub_color
from .config import LayoutConfig
from .models import (
    CablePath,
    EdgeKind,
    GridCell,
    HubGroup,
    NodeKind,
    PathStyle,
    PowerRun,
    WiringEdge,
    WiringGraph,
    WiringNode,
    backup_hub_node_id,
    cabinet_node_id,
    hub_node_id,
    power_feed_node_id,
)

logger = logging.getLogger(__name__)


def _path(points: List[Point], style: Optional[PathStyle] = None) -> CablePath:
    if style is None:
        style = PathStyle.STRAIGHT if len(points) <= 2 else PathStyle.POLYLINE
    return CablePath(points=tuple(points), style=style)


def _conflicts(pts: Sequence[Point], primary: Sequence[Sequence[Point]]) -> Tuple[int, int]:
    """(cables run along, crossings) between a route and the primary cabling."""
    overlaps = sum(1 for other in primary if polylines_overlap(pts, other))
    crossings = sum(polyline_crossings(pts, other) for other in primary)
    return overlaps, crossings


def _grid_shape(cells: Sequence[GridCell]) -> Tuple[int, int]:
    if not cells:
        return 0, 0
    return max(c.column for c in cells) + 1, max(c.row for c in cells) + 1


class RoutingPlanner:
    """
    Routes hub feeds, cabinet chains and backup feeds.

    Usage:
        planner = RoutingPlanner(LayoutConfig())
        data = planner.route_data(serpentine_cells(5, 2), groups, redundancy=True)
        power = planner.route_power(row_major_cells(5, 2), runs)
    """

    def __init__(self, layout: Optional[LayoutConfig] = None):
        self.layout_config = layout or LayoutConfig()

    def _layout(self, cells: Sequence[GridCell]) -> WallLayout:
        columns, rows = _grid_shape(cells)
        return WallLayout(self.layout_config, columns, rows)

    # --- shared pieces ---

    def _add_cabinets(
        self,
        graph: WiringGraph,
        layout: WallLayout,
        cells: Dict[int, GridCell],
        groups: Sequence[Sequence[int]],
    ) -> None:
        total = len(groups)
        for index, cabinets in enumerate(groups):
            color = hub_color(index, total)
            rects = []
            for cabinet_id in cabinets:
                cell = cells[cabinet_id]
                rect = layout.cabinet_rect(cell)
                rects.append(rect)
                graph.add_node(
                    WiringNode(
                        id=cabinet_node_id(cabinet_id),
                        kind=NodeKind.CABINET,
                        label=f"Cabinet {cabinet_id}",
                        rect=rect,
                        group_index=index,
                        color=color,
                        cell=cell,
                    )
                )
            bounds = layout.group_bounds(rects)
            if bounds is not None:
                graph.groups[index] = bounds

    def _feed_path(self, layout: WallLayout, index: int, source: Rect, cell: GridCell) -> CablePath:
        """Hub (or power feed) to the first cabinet of its group."""
        target = layout.cabinet_rect(cell)
        if index == 0:
            return _path(step_path(ports(source)["E"], ports(target)["W"]), PathStyle.STEP)
        # Later feeds run in the gap above the target row so they never cut across cabinets
        pts = elbow_path(
            ports(source)["E"],
            ports(target)["N"],
            lane_x=layout.hub_lane_x(index),
            lane_y=layout.gap_above(cell.row),
        )
        return _path(pts, PathStyle.POLYLINE)

    # --- data wiring ---

    def _chain_path(self, layout: WallLayout, a: GridCell, b: GridCell) -> CablePath:
        ra, rb = layout.cabinet_rect(a), layout.cabinet_rect(b)
        if b.row != a.row:
            # Serpentine turn at the grid edge: straight down, bottom to top handle
            return _path([ports(ra)["S"], ports(rb)["N"]], PathStyle.STRAIGHT)
        if a.row % 2 == 0:
            return _path(step_path(ports(ra)["E"], ports(rb)["W"]), PathStyle.STEP)
        return _path(step_path(ports(ra)["W"], ports(rb)["E"]), PathStyle.STEP)

    def _backup_path(
        self,
        layout: WallLayout,
        index: int,
        cell: GridCell,
        primary: Sequence[Sequence[Point]],
    ) -> CablePath:
        source = ports(layout.backup_hub_rect(index))["W"]
        target = layout.cabinet_rect(cell)
        lane_x = layout.corridor_x(index)

        if cell.column == layout.columns - 1:
            return _path(route_via_outer_lane(source, ports(target)["E"], lane_x=lane_x))

        offset = self.layout_config.backup_row_offset
        from_above = route_via_outer_lane(source, ports(target)["N"], lane_x=lane_x, approach_y=target.top - offset)
        from_below = route_via_outer_lane(source, ports(target)["S"], lane_x=lane_x, approach_y=target.bottom + offset)

        # Even rows are entered from above, odd rows from below: the serpentine
        # turns sit on the opposite side. The other side wins when it runs
        # along or across fewer primary cables.
        candidates = [from_above, from_below] if cell.row % 2 == 0 else [from_below, from_above]
        scored = [(_conflicts(pts, primary), i) for i, pts in enumerate(candidates)]
        (overlaps, crossings), best = min(scored)
        if overlaps or crossings:
            # The next group's feed closes the top of an even-row cabinet and its
            # turn at the row end closes the bottom: one crossing is left.
            logger.debug(
                "Backup feed %d meets primary cabling (%d overlap(s), %d crossing(s))",
                index,
                overlaps,
                crossings,
            )
        return _path(candidates[best])

    def route_data(
        self,
        cells: Sequence[GridCell],
        groups: Sequence[HubGroup],
        redundancy: bool = False,
    ) -> WiringGraph:
        graph = WiringGraph()
        if not cells or not groups:
            return graph

        layout = self._layout(cells)
        by_id = {c.cabinet_id: c for c in cells}
        total = len(groups)

        for group in groups:
            color = hub_color(group.index, total)
            rect = layout.hub_rect(group.index)
            graph.add_node(
                WiringNode(
                    id=hub_node_id(group.index),
                    kind=NodeKind.HUB,
                    label=f"Data Hub {group.index + 1}",
                    rect=rect,
                    group_index=group.index,
                    color=color,
                )
            )
            if redundancy:
                graph.add_node(
                    WiringNode(
                        id=backup_hub_node_id(group.index),
                        kind=NodeKind.BACKUP_HUB,
                        label=f"Backup Hub {group.index + 1}",
                        rect=layout.backup_hub_rect(group.index),
                        group_index=group.index,
                        color=color,
                    )
                )

        self._add_cabinets(graph, layout, by_id, [g.cabinets for g in groups])

        chains: Dict[int, List[WiringEdge]] = {}
        for group in groups:
            color = hub_color(group.index, total)
            first = by_id[group.first_cabinet]
            graph.add_edge(
                WiringEdge(
                    from_id=hub_node_id(group.index),
                    to_id=cabinet_node_id(first.cabinet_id),
                    kind=EdgeKind.HUB_FEED,
                    path=self._feed_path(layout, group.index, layout.hub_rect(group.index), first),
                    group_index=group.index,
                    color=color,
                )
            )

            # Chains stay inside the group; nothing links one group's tail to the next head
            chain: List[WiringEdge] = []
            for a_id, b_id in zip(group.cabinets, group.cabinets[1:]):
                chain.append(
                    WiringEdge(
                        from_id=cabinet_node_id(a_id),
                        to_id=cabinet_node_id(b_id),
                        kind=EdgeKind.CHAIN,
                        path=self._chain_path(layout, by_id[a_id], by_id[b_id]),
                        group_index=group.index,
                        color=color,
                    )
                )
            for edge in chain:
                graph.add_edge(edge)
            chains[group.index] = chain

        if redundancy:
            self._add_backups(graph, layout, by_id, groups, chains)

        logger.debug("Routed %d data edges over %d hub(s)", len(graph.edges), total)
        return graph

    def _add_backups(
        self,
        graph: WiringGraph,
        layout: WallLayout,
        by_id: Dict[int, GridCell],
        groups: Sequence[HubGroup],
        chains: Dict[int, List[WiringEdge]],
    ) -> None:
        total = len(groups)
        primary = [e.path.points for e in graph.edges]
        for group in groups:
            color = hub_color(group.index, total)
            last = by_id[group.last_cabinet]
            graph.add_edge(
                WiringEdge(
                    from_id=backup_hub_node_id(group.index),
                    to_id=cabinet_node_id(last.cabinet_id),
                    kind=EdgeKind.BACKUP_FEED,
                    path=self._backup_path(layout, group.index, last, primary),
                    group_index=group.index,
                    color=color,
                    dashed=True,
                )
            )
            for edge in reversed(chains[group.index]):
                graph.add_edge(
                    WiringEdge(
                        from_id=edge.to_id,
                        to_id=edge.from_id,
                        kind=EdgeKind.BACKUP_CHAIN,
                        path=edge.path.reversed(),
                        group_index=group.index,
                        color=color,
                        dashed=True,
                    )
                )

    # --- power wiring ---

    def _power_chain_path(self, layout: WallLayout, a: GridCell, b: GridCell) -> CablePath:
        ra, rb = layout.cabinet_rect(a), layout.cabinet_rect(b)
        if a.row == b.row:
            return _path([ports(ra)["E"], ports(rb)["W"]], PathStyle.STRAIGHT)
        # Row wrap: drop just below the row, run back to the row start, enter from the top.
        # Later power feeds use the middle of the gap.
        pts = elbow_path(ports(ra)["S"], ports(rb)["N"], lane_x=ports(ra)["S"][0], lane_y=layout.wrap_level(a.row))
        return _path(pts)

    def route_power(self, cells: Sequence[GridCell], runs: Sequence[PowerRun]) -> WiringGraph:
        graph = WiringGraph()
        if not cells or not runs:
            return graph

        layout = self._layout(cells)
        by_id = {c.cabinet_id: c for c in cells}
        total = len(runs)

        for run in runs:
            graph.add_node(
                WiringNode(
                    id=power_feed_node_id(run.index),
                    kind=NodeKind.POWER_FEED,
                    label=f"Power Feed {run.index + 1}",
                    rect=layout.hub_rect(run.index),
                    group_index=run.index,
                    color=hub_color(run.index, total),
                )
            )

        self._add_cabinets(graph, layout, by_id, [r.cabinets for r in runs])

        for run in runs:
            color = hub_color(run.index, total)
            first = by_id[run.first_cabinet]
            graph.add_edge(
                WiringEdge(
                    from_id=power_feed_node_id(run.index),
                    to_id=cabinet_node_id(first.cabinet_id),
                    kind=EdgeKind.POWER_FEED,
                    path=self._feed_path(layout, run.index, layout.hub_rect(run.index), first),
                    group_index=run.index,
                    color=color,
                )
            )
            for a_id, b_id in zip(run.cabinets, run.cabinets[1:]):
                graph.add_edge(
                    WiringEdge(
                        from_id=cabinet_node_id(a_id),
                        to_id=cabinet_node_id(b_id),
                        kind=EdgeKind.POWER_CHAIN,
                        path=self._power_chain_path(layout, by_id[a_id], by_id[b_id]),
                        group_index=run.index,
                        color=color,
                    )
                )

        logger.debug("Routed %d power edges over %d run(s)", len(graph.edges), total)
        return graph
