"""
In-memory hand-off formats for the rendering and quotation layers.

- plan_to_dict: JSON-ready dict of a WallPlan
- graph_to_networkx: networkx.DiGraph with node/edge attributes
"""

from __future__ import annotations

from typing import Any, Dict, List

import networkx as nx

from .core.models import CablePath, ControllerSelection, GridCell, WiringEdge, WiringGraph, WiringNode
from .core.planner import WallPlan
from .views.geometry import Rect


def _rect(r: Rect) -> Dict[str, float]:
    return {"x": r.x, "y": r.y, "width": r.w, "height": r.h}


def _cell(c: GridCell) -> Dict[str, int]:
    return {"cabinet_id": c.cabinet_id, "row": c.row, "column": c.column}


def path_to_dict(path: CablePath) -> Dict[str, Any]:
    return {
        "style": path.style.value,
        "points": [{"x": x, "y": y} for x, y in path.points],
    }


def node_to_dict(node: WiringNode) -> Dict[str, Any]:
    return {
        "id": node.id,
        "kind": node.kind.value,
        "label": node.label,
        "position": {"x": node.rect.x, "y": node.rect.y},
        "size": {"width": node.rect.w, "height": node.rect.h},
        "group": node.group_index,
        "color": node.color,
        "cell": _cell(node.cell) if node.cell else None,
    }


def edge_to_dict(edge: WiringEdge) -> Dict[str, Any]:
    return {
        "id": edge.key(),
        "source": edge.from_id,
        "target": edge.to_id,
        "kind": edge.kind.value,
        "path": path_to_dict(edge.path),
        "group": edge.group_index,
        "color": edge.color,
        "dashed": edge.dashed,
    }


def graph_to_dict(graph: WiringGraph) -> Dict[str, Any]:
    return {
        "nodes": [node_to_dict(n) for n in graph.nodes],
        "edges": [edge_to_dict(e) for e in graph.edges],
        "groups": {str(i): _rect(r) for i, r in sorted(graph.groups.items())},
    }


def selection_to_dict(selection: ControllerSelection) -> Dict[str, Any]:
    ctrl = selection.selected_controller
    return {
        "controller": {
            "id": ctrl.id,
            "name": ctrl.name,
            "port_count": ctrl.port_count,
            "pixel_capacity": ctrl.pixel_capacity,
            "type": ctrl.type.value,
            "min_ports_for_redundancy": ctrl.min_ports_for_redundancy,
        },
        "required_ports": selection.required_ports,
        "backup_ports": selection.backup_ports,
        "data_hub_ports": selection.data_hub_ports,
        "total_pixels": selection.total_pixels,
        "is_redundancy_mode": selection.is_redundancy_mode,
        "demanded_ports": selection.demanded_ports,
        "capacity_exceeded": selection.capacity_exceeded,
    }


def plan_to_dict(plan: WallPlan) -> Dict[str, Any]:
    product = plan.product
    hub_groups: List[Dict[str, Any]] = [
        {
            "index": g.index,
            "cabinets": list(g.cabinets),
            "first_cabinet": g.first_cabinet,
            "pixel_load": g.pixel_load,
        }
        for g in plan.hub_groups
    ]
    power_runs: List[Dict[str, Any]] = [
        {"index": r.index, "cabinets": list(r.cabinets), "first_cabinet": r.first_cabinet}
        for r in plan.power_runs
    ]
    return {
        "product": {
            "name": product.name,
            "resolution": {"width": product.resolution_width, "height": product.resolution_height},
            "cabinet_mm": {"width": product.cabinet_width_mm, "height": product.cabinet_height_mm},
            "pixel_pitch": product.pixel_pitch,
        },
        "grid": {"columns": plan.grid.columns, "rows": plan.grid.rows},
        "redundancy": plan.redundancy,
        "selection": selection_to_dict(plan.selection),
        "hub_groups": hub_groups,
        "power_runs": power_runs,
        "run_length": plan.run_length,
        "data_graph": graph_to_dict(plan.data_graph),
        "power_graph": graph_to_dict(plan.power_graph),
        "warnings": list(plan.warnings),
    }


def graph_to_networkx(graph: WiringGraph) -> "nx.DiGraph":
    """Convert a WiringGraph to a NetworkX DiGraph.

    Parallel edges between the same pair (a chain link and its backup mirror
    run in opposite directions) never collide, so a DiGraph is enough.
    """
    G = nx.DiGraph()

    for node in graph.nodes:
        G.add_node(
            node.id,
            kind=node.kind.value,
            label=node.label,
            pos=(node.rect.cx, node.rect.cy),
            group=node.group_index,
            color=node.color,
        )

    for edge in graph.edges:
        G.add_edge(
            edge.from_id,
            edge.to_id,
            kind=edge.kind.value,
            style=edge.path.style.value,
            points=list(edge.path.points),
            group=edge.group_index,
            color=edge.color,
            dashed=edge.dashed,
        )

    return G
