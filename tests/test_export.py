"""Tests for plan export to dicts and networkx."""

import json

import networkx as nx
import pytest

from ledwiring import plan_wall
from ledwiring.core.models import CabinetGrid, Product
from ledwiring.export import graph_to_networkx, plan_to_dict


@pytest.fixture
def plan():
    product = Product("Test", 500, 400, 600, 337.5, 2.5)
    return plan_wall(product, CabinetGrid(5, 2), redundancy=True)


def test_plan_to_dict_is_json_ready(plan):
    data = plan_to_dict(plan)
    # Round trip through JSON must not change anything
    assert json.loads(json.dumps(data)) == data

    assert data["grid"] == {"columns": 5, "rows": 2}
    assert data["selection"]["controller"]["id"] == plan.selection.selected_controller.id
    assert data["selection"]["required_ports"] == plan.selection.required_ports
    assert [g["cabinets"] for g in data["hub_groups"]] == [list(g.cabinets) for g in plan.hub_groups]
    assert len(data["data_graph"]["edges"]) == len(plan.data_graph.edges)
    assert set(data["data_graph"]["groups"]) == {str(g.index) for g in plan.hub_groups}


def test_edge_dict_shape(plan):
    edges = plan_to_dict(plan)["data_graph"]["edges"]
    backup = [e for e in edges if e["kind"] == "backup_feed"][0]
    assert backup["dashed"] is True
    assert backup["source"].startswith("backup-hub-")
    assert backup["path"]["style"] == "polyline"
    assert all(set(p) == {"x", "y"} for p in backup["path"]["points"])


def test_node_kinds_use_wire_names(plan):
    kinds = {n["kind"] for n in plan_to_dict(plan)["data_graph"]["nodes"]}
    assert kinds == {"hub", "backupHub", "cabinet"}
    power_kinds = {n["kind"] for n in plan_to_dict(plan)["power_graph"]["nodes"]}
    assert power_kinds == {"powerFeed", "cabinet"}


def test_graph_to_networkx(plan):
    G = graph_to_networkx(plan.data_graph)
    assert isinstance(G, nx.DiGraph)
    assert G.number_of_nodes() == len(plan.data_graph.nodes)
    assert G.number_of_edges() == len(plan.data_graph.edges)

    assert G.nodes["data-hub-1"]["kind"] == "hub"
    assert G.nodes["cabinet-1"]["group"] == 0
    assert G.edges["data-hub-1", "cabinet-1"]["kind"] == "hub_feed"
    assert G.edges["cabinet-2", "cabinet-1"]["dashed"] is True


def test_networkx_chains_form_paths(plan):
    G = graph_to_networkx(plan.data_graph)
    for group in plan.hub_groups:
        path = nx.shortest_path(G, f"data-hub-{group.index + 1}", f"cabinet-{group.last_cabinet}")
        assert path[1:] == [f"cabinet-{c}" for c in group.cabinets]
