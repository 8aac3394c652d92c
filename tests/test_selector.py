"""Tests for controller selection."""

import math

import pytest

from ledwiring.core.catalog import DEFAULT_CATALOG, ControllerCatalog
from ledwiring.core.models import CabinetGrid, Controller, ControllerType, Product
from ledwiring.core.selector import select_controller, select_for_grid
from ledwiring.errors import CatalogError, ValidationError


def test_single_port_picks_tb2():
    sel = select_controller(1, 500_000, False)
    assert sel.selected_controller.id == "tb2"
    assert sel.required_ports == 1
    assert sel.backup_ports == 0
    assert not sel.capacity_exceeded


def test_redundancy_doubles_ports():
    sel = select_controller(3, 1_500_000, True)
    assert sel.required_ports == 6
    assert sel.backup_ports == 3
    assert sel.selected_controller.id == "vx600"
    assert sel.selected_controller.min_ports_for_redundancy > 0


def test_redundancy_never_picks_tb2():
    sel = select_controller(1, 100_000, True)
    assert sel.required_ports == 2
    assert sel.selected_controller.id == "tb40"


def test_pixel_fallback_keeps_port_count_minimal():
    # TB60 has the ports but only 2.3M pixels; VX400 has both
    sel = select_controller(4, 2_500_000, False)
    assert sel.selected_controller.id == "vx400"
    assert not sel.capacity_exceeded


def test_pixel_fallback_tie_breaks_on_capacity():
    # TB40 lacks pixels; TB60 and VX400 both have 4 ports, TB60 is smaller
    sel = select_controller(2, 2_000_000, False)
    assert sel.selected_controller.id == "tb60"


def test_no_port_match_falls_back_to_largest():
    sel = select_controller(9, 5_000_000, True)
    assert sel.selected_controller.id == "4k-prime"
    assert sel.required_ports == 16
    assert sel.demanded_ports == 18
    assert sel.backup_ports == 9
    assert sel.capacity_exceeded


def test_pixels_beyond_every_controller_reported_not_raised():
    sel = select_controller(2, 20_000_000, False)
    assert sel.selected_controller.id == "tb40"
    assert sel.capacity_exceeded


def test_zero_workload():
    sel = select_controller(0, 0, False)
    assert sel.selected_controller.id == "tb2"
    assert sel.required_ports == 0


def test_negative_inputs_rejected():
    with pytest.raises(ValidationError):
        select_controller(-1, 0, False)


def test_catalog_without_redundant_controllers():
    catalog = ControllerCatalog([Controller("solo", "Solo", 4, 2.0, ControllerType.ASYNCHRONOUS, 0)])
    assert select_controller(1, 1000, False, catalog=catalog).selected_controller.id == "solo"
    with pytest.raises(CatalogError):
        select_controller(1, 1000, True, catalog=catalog)


@pytest.mark.parametrize("redundancy", [False, True])
def test_selection_is_sufficient_and_minimal_whenever_possible(redundancy):
    for hub_ports in range(0, 10):
        for pixels in (0, 400_000, 1_000_000, 2_400_000, 3_000_000, 6_000_000, 12_000_000):
            required = hub_ports * (2 if redundancy else 1)
            feasible = [c for c in DEFAULT_CATALOG.candidates(redundancy) if c.handles(required, pixels)]
            sel = select_controller(hub_ports, pixels, redundancy)
            assert sel.required_ports >= 0
            if feasible:
                ctrl = sel.selected_controller
                assert ctrl.handles(required, pixels)
                assert ctrl.port_count == min(c.port_count for c in feasible)
                assert not sel.capacity_exceeded
            else:
                assert sel.capacity_exceeded


def test_redundant_required_ports_double_hub_ports():
    for total in (1, 655_000, 655_001, 3_000_000):
        sel = select_controller(math.ceil(total / 655_000), total, True)
        assert sel.required_ports == 2 * math.ceil(total / 655_000)


def test_select_for_grid_and_utilization():
    product = Product("P2.5", 240, 135, 600, 337.5, 2.5)
    sel = select_for_grid(CabinetGrid(5, 4), product)
    assert sel.total_pixels == 240 * 5 * 135 * 4
    assert sel.data_hub_ports == math.ceil(648_000 / 655_000)
    assert sel.selected_controller.id == "tb2"
    assert sel.pixel_utilization == pytest.approx(648_000 / 650_000)
    assert sel.port_utilization == pytest.approx(1.0)
