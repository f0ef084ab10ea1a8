"""Command-line routing and map checks.

Example:
  python -m hospital_nav.cli route --map assets/sample_map.json --from lobby --to icu
  python -m hospital_nav.cli validate --map assets/sample_map.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from hospital_nav.config import Settings, configure_logging
from hospital_nav.corridor_graph import build_corridor_graph, graph_summary
from hospital_nav.map_data import load_map_file
from hospital_nav.models import ConfigurationError
from hospital_nav.navigation import plan_route
from hospital_nav.utils import to_serializable_points
from hospital_nav.validation import validate_map

logger = logging.getLogger("hospital_nav.cli")


def parse_args(argv: list[str] | None = None, defaults: Settings | None = None) -> argparse.Namespace:
    defaults = defaults or Settings()
    parser = argparse.ArgumentParser(description="Hospital campus corridor routing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    route = sub.add_parser("route", help="Print directions between two locations")
    route.add_argument("--map", dest="map_path", type=str, required=True)
    route.add_argument("--from", dest="from_id", type=str, required=True)
    route.add_argument("--to", dest="to_id", type=str, required=True)
    route.add_argument("--max-iterations", type=int, default=defaults.max_iterations)
    route.add_argument("--room-link-radius", type=float, default=defaults.room_link_radius)
    route.add_argument("--json", action="store_true", help="Print the route as JSON")

    validate = sub.add_parser("validate", help="Check map data and print the report")
    validate.add_argument("--map", dest="map_path", type=str, required=True)
    validate.add_argument("--room-link-radius", type=float, default=defaults.room_link_radius)

    return parser.parse_args(argv)


def run_route(args: argparse.Namespace) -> int:
    map_data = load_map_file(args.map_path)
    try:
        result = plan_route(
            map_data,
            args.from_id,
            args.to_id,
            max_iterations=args.max_iterations,
            room_link_radius=args.room_link_radius,
            strict=True,
        )
    except ConfigurationError as exc:
        logger.error("Map data error: %s", exc)
        return 2

    if args.json:
        print(
            json.dumps(
                {
                    "status": result.status,
                    "path": result.path,
                    "directions": result.directions,
                    "world_path": to_serializable_points(result.world_path),
                    "total_length_m": result.total_length,
                },
                indent=2,
            )
        )
    else:
        for idx, step in enumerate(result.directions, start=1):
            print(f"{idx}. {step}")
        if result.found:
            print(f"Total length: {result.total_length:.2f} m")

    return 0 if result.status in ("found", "already_there", "same_location") else 1


def run_validate(args: argparse.Namespace) -> int:
    map_data = load_map_file(args.map_path)
    report = validate_map(map_data, room_link_radius=args.room_link_radius)
    graph = build_corridor_graph(map_data.corridors, map_data.rooms, room_link_radius=args.room_link_radius)
    report["graph"] = graph_summary(graph)
    print(json.dumps(report, indent=2))
    return 0 if report["ok"] else 1


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        configure_logging()
        logger.error("Invalid settings: %s", exc)
        return 2

    args = parse_args(argv, settings)

    try:
        configure_logging("DEBUG" if args.verbose else settings.log_level)
        if args.command == "route":
            return run_route(args)
        return run_validate(args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
