"""Tests for the wall planning pipeline."""

from __future__ import annotations

import pytest

from ledwiring import plan_wall
from ledwiring.core.config import PlannerConfig
from ledwiring.core.digest import plan_digest
from ledwiring.core.models import CabinetGrid, EdgeKind, NodeKind, Product
from ledwiring.errors import ValidationError


@pytest.fixture
def product():
    return Product("Test 500x400", 500, 400, 600, 337.5, 2.5)


def test_plan_small_wall(product):
    plan = plan_wall(product, CabinetGrid(5, 1))

    assert plan.workload.total_pixels == 1_000_000
    assert plan.workload.data_hub_ports == 2
    assert plan.selection.selected_controller.id == "tb40"
    assert [g.cabinets for g in plan.hub_groups] == [(1, 2), (3, 4, 5)]
    assert plan.total_hubs == 2
    assert plan.hub_assignments == {1: 0, 2: 0, 3: 1, 4: 1, 5: 1}
    assert plan.run_length == 25
    assert [r.cabinets for r in plan.power_runs] == [(1, 2, 3, 4, 5)]
    assert plan.warnings == ()


def test_plan_is_deterministic(product):
    a = plan_wall(product, CabinetGrid(6, 4), redundancy=True)
    b = plan_wall(product, CabinetGrid(6, 4), redundancy=True)
    assert a == b
    assert plan_digest(a) == plan_digest(b)
    assert [e.key() for e in a.data_graph.edges] == [e.key() for e in b.data_graph.edges]
    assert [e.path for e in a.data_graph.edges] == [e.path for e in b.data_graph.edges]


def test_digest_changes_with_inputs(product):
    a = plan_wall(product, CabinetGrid(6, 4))
    b = plan_wall(product, CabinetGrid(6, 4), redundancy=True)
    assert plan_digest(a) != plan_digest(b)


def test_redundant_plan_graph(product):
    plan = plan_wall(product, CabinetGrid(5, 1), redundancy=True)
    assert plan.selection.required_ports == 4
    assert plan.selection.backup_ports == 2
    assert plan.selection.selected_controller.id == "tb60"
    stats = plan.data_graph.stats()
    assert stats["backupHub_nodes"] == 2
    assert stats["backup_feed_edges"] == 2
    assert stats["backup_chain_edges"] == stats["chain_edges"] == 3


def test_capacity_exceeded_is_a_warning():
    product = Product("Big", 640, 360, 500, 500, 0.78125)
    plan = plan_wall(product, CabinetGrid(20, 12))
    assert plan.selection.capacity_exceeded
    assert plan.selection.selected_controller.id == "4k-prime"
    assert plan.warnings[0].startswith("Exceeds capacity:")
    # Partitioning and routing still happen
    assert plan.data_graph.edges


def test_oversized_cabinet_warning():
    product = Product("Huge", 1000, 1000, 500, 500, 0.5)
    plan = plan_wall(product, CabinetGrid(3, 1))
    assert [g.cabinets for g in plan.hub_groups] == [(1,), (2,), (3,)]
    assert any("exceeds the per-port limit" in w for w in plan.warnings)


def test_empty_grid_produces_empty_plan(product):
    plan = plan_wall(product, CabinetGrid(0, 3))
    assert plan.hub_groups == ()
    assert plan.power_runs == ()
    assert plan.data_graph.edges == []
    assert plan.power_graph.nodes == []
    assert plan.workload.data_hub_ports == 0
    assert not plan.selection.capacity_exceeded


def test_power_run_length_from_pitch():
    product = Product("P4", 150, 84, 600, 337.5, 4.0)
    plan = plan_wall(product, CabinetGrid(5, 2))
    assert plan.run_length == 4
    assert [r.cabinets for r in plan.power_runs] == [(1, 2, 3, 4), (5, 6, 7, 8), (9, 10)]
    assert len(plan.power_graph.nodes_of(NodeKind.POWER_FEED)) == 3


def test_power_and_data_use_independent_orders(product):
    plan = plan_wall(product, CabinetGrid(3, 2))
    data = {c.cabinet_id: (c.row, c.column) for c in plan.data_cells}
    power = {c.cabinet_id: (c.row, c.column) for c in plan.power_cells}
    assert data[4] == (1, 2)
    assert power[4] == (1, 0)


def test_custom_pixel_limit(product):
    config = PlannerConfig(pixel_limit_per_port=400_000)
    plan = plan_wall(product, CabinetGrid(4, 1), config=config)
    assert plan.workload.data_hub_ports == 2
    assert [g.cabinets for g in plan.hub_groups] == [(1, 2), (3, 4)]
    assert len(plan.data_graph.edges_of(EdgeKind.HUB_FEED)) == 2


def test_summary(product):
    summary = plan_wall(product, CabinetGrid(5, 1)).summary()
    assert summary["grid"] == "5x1"
    assert summary["controller"] == "TB40"
    assert summary["hub_groups"] == [[1, 2], [3, 4, 5]]


def test_product_from_dimensions():
    product = Product.from_dimensions("P1.56", 600, 337.5, 1.5625)
    assert (product.resolution_width, product.resolution_height) == (384, 216)
    assert product.pixels_per_cabinet == 82_944


def test_grid_for_display(product):
    assert CabinetGrid.for_display(1800, 675, product) == CabinetGrid(3, 2)
    assert CabinetGrid.for_display(1801, 676, product) == CabinetGrid(4, 3)


def test_invalid_inputs_rejected():
    with pytest.raises(ValidationError):
        CabinetGrid(-1, 2)
    with pytest.raises(ValidationError):
        Product("Bad", 100, 100, 600, 337.5, 0)
    with pytest.raises(ValueError):
        Product("Bad", -1, 100, 600, 337.5, 2.5)
