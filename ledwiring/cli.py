#!/usr/bin/env python3
"""
ledwiring CLI - LED video wall wiring planner

Usage:
    ledwiring controllers                          List the controller catalog
    ledwiring select <ports> <pixels>              Pick a controller for a workload
    ledwiring plan --columns C --rows R ...        Plan hubs, power runs and cable routes
"""

import argparse
import json
import logging
import sys

from .errors import WiringError


def _pair(text: str, kind=float):
    try:
        a, b = text.lower().split("x")
        return kind(a), kind(b)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WxH, got {text!r}")


def _int_pair(text: str):
    return _pair(text, int)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="ledwiring: LED video wall wiring planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    ledwiring controllers
    ledwiring select 3 1800000 --redundancy
    ledwiring plan --columns 5 --rows 3 --resolution 384x216 --pitch 1.5625
    ledwiring plan --display 3000x1350 --cabinet 600x337.5 --pitch 2.5 --json
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--catalog", help="Controller catalog YAML file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # controllers command
    subparsers.add_parser("controllers", help="List the controller catalog")

    # select command
    select_parser = subparsers.add_parser("select", help="Pick a controller for a workload")
    select_parser.add_argument("ports", type=int, help="Data-hub ports")
    select_parser.add_argument("pixels", type=int, help="Total pixels")
    select_parser.add_argument("--redundancy", "-r", action="store_true", help="Mirror every port")
    select_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    # plan command
    plan_parser = subparsers.add_parser("plan", help="Plan hubs, power runs and cable routes")
    plan_parser.add_argument("--name", default="Custom", help="Product name")
    plan_parser.add_argument("--columns", "-c", type=int, help="Cabinet columns")
    plan_parser.add_argument("--rows", "-R", type=int, help="Cabinet rows")
    plan_parser.add_argument("--display", type=_pair, help="Display size in mm as WxH (instead of columns/rows)")
    plan_parser.add_argument("--resolution", type=_int_pair, help="Cabinet resolution in pixels as WxH")
    plan_parser.add_argument("--cabinet", type=_pair, default=(600.0, 337.5), help="Cabinet size in mm as WxH")
    plan_parser.add_argument("--pitch", "-p", type=float, required=True, help="Pixel pitch in mm")
    plan_parser.add_argument("--redundancy", "-r", action="store_true", help="Add backup hubs and cables")
    plan_parser.add_argument("--config", help="Planner config YAML file")
    plan_parser.add_argument("--json", "-j", action="store_true", help="Output the full plan as JSON")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    from .logging_config import setup_logging

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        catalog = None
        if args.catalog:
            from .core.catalog import load_catalog

            catalog = load_catalog(args.catalog)

        if args.command == "controllers":
            return cmd_controllers(catalog, args)
        elif args.command == "select":
            return cmd_select(catalog, args)
        elif args.command == "plan":
            return cmd_plan(catalog, args)
    except WiringError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def cmd_controllers(catalog, args):
    """Handle controllers command."""
    from .core.catalog import DEFAULT_CATALOG

    catalog = catalog or DEFAULT_CATALOG

    print(f"# Controllers ({len(catalog)})")
    print("")
    for ctrl in catalog:
        redundancy = "redundant" if ctrl.supports_redundancy else "no redundancy"
        print(f"- `{ctrl.name}`: {ctrl.port_count} ports, {ctrl.pixel_capacity}M pixels, {ctrl.type.value}, {redundancy}")

    return 0


def cmd_select(catalog, args):
    """Handle select command."""
    from .core.selector import select_controller
    from .export import selection_to_dict

    selection = select_controller(args.ports, args.pixels, args.redundancy, catalog=catalog)

    if args.json:
        print(json.dumps(selection_to_dict(selection), indent=2))
        return 0

    ctrl = selection.selected_controller
    print(f"# Controller: {ctrl.name}")
    print("")
    print(f"- **Data Hub Ports:** {selection.data_hub_ports}")
    print(f"- **Required Ports:** {selection.required_ports}")
    print(f"- **Backup Ports:** {selection.backup_ports}")
    print(f"- **Port Count:** {ctrl.port_count}")
    print(f"- **Pixel Capacity:** {ctrl.pixel_capacity:.1f}M")
    if selection.capacity_exceeded:
        print("")
        print("**Exceeds capacity** - no controller in the catalog covers this workload")

    return 0


def cmd_plan(catalog, args):
    """Handle plan command."""
    from .core.config import PlannerConfig, load_config
    from .core.models import CabinetGrid, Product
    from .core.planner import plan_wall
    from .errors import ValidationError
    from .export import plan_to_dict

    cab_w, cab_h = args.cabinet
    if args.resolution:
        res_w, res_h = args.resolution
        product = Product(args.name, res_w, res_h, cab_w, cab_h, args.pitch)
    else:
        product = Product.from_dimensions(args.name, cab_w, cab_h, args.pitch)

    if args.display:
        grid = CabinetGrid.for_display(args.display[0], args.display[1], product)
    elif args.columns is not None and args.rows is not None:
        grid = CabinetGrid(args.columns, args.rows)
    else:
        raise ValidationError("Give either --columns and --rows, or --display")

    config = load_config(args.config) if args.config else PlannerConfig()
    plan = plan_wall(product, grid, redundancy=args.redundancy, config=config, catalog=catalog)

    if args.json:
        print(json.dumps(plan_to_dict(plan), indent=2))
        return 0

    summary = plan.summary()
    print(f"# Wiring plan: {summary['product']} ({summary['grid']})")
    print("")
    print(f"- **Cabinets:** {summary['cabinets']}")
    print(f"- **Total Pixels:** {summary['total_pixels']:,}")
    print(f"- **Controller:** {summary['controller']} ({summary['required_ports']} ports required)")
    print(f"- **Data Hubs:** {plan.total_hubs}")
    for group in plan.hub_groups:
        print(f"    - Hub {group.index + 1}: cabinets {list(group.cabinets)} ({group.pixel_load:,} px)")
    print(f"- **Power Runs:** {len(plan.power_runs)} (max {plan.run_length} cabinets each)")
    for run in plan.power_runs:
        print(f"    - Run {run.index + 1}: cabinets {list(run.cabinets)}")
    stats = plan.data_graph.stats()
    print(f"- **Data Cables:** {len(plan.data_graph.edges)} ({stats['backup_feed_edges']} backup feeds)")

    if plan.warnings:
        print("")
        for w in plan.warnings:
            print(f"**Warning:** {w}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
