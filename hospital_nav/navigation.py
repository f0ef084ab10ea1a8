"""Location-to-location route planning used by the HTTP layer and CLI.

Resolves selected IDs to world positions, runs the corridor search and packs
the route, its directions and its polyline into one result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from hospital_nav.corridor_graph import ROOM_LINK_RADIUS
from hospital_nav.directions import NO_PATH_MESSAGE, describe_path
from hospital_nav.map_data import MapData
from hospital_nav.models import Position3, is_finite_position, planar
from hospital_nav.pathfinding import DEFAULT_MAX_ITERATIONS, find_path_result
from hospital_nav.route_geometry import route_polyline

logger = logging.getLogger(__name__)

CURRENT_LOCATION_ID = "current"

NO_DATA_MESSAGE = "No navigation data available."
INVALID_PLAYER_MESSAGE = "Invalid player position."
UNKNOWN_LOCATION_MESSAGE = "Could not find positions for selected locations."
INVALID_POSITION_MESSAGE = "Invalid position data."

RouteStatus = Literal[
    "found",
    "already_there",
    "same_location",
    "unreachable",
    "iteration_limit",
    "no_data",
    "invalid_position",
    "unknown_location",
]


@dataclass(slots=True)
class NavigationResult:
    """Route plus everything a client needs to show it."""

    status: RouteStatus
    path: list[str] = field(default_factory=list)
    directions: list[str] = field(default_factory=list)
    start: Position3 | None = None
    goal: Position3 | None = None
    world_path: list[Position3] = field(default_factory=list)
    total_length: float = 0.0

    @property
    def found(self) -> bool:
        return self.status == "found"


def plan_route(
    map_data: MapData,
    from_id: str | None,
    to_id: str | None,
    *,
    current_position: Position3 | None = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    room_link_radius: float = ROOM_LINK_RADIUS,
    strict: bool = False,
) -> NavigationResult:
    """Plan a route between two selectable locations.

    `from_id` may be `"current"` to start at `current_position`.

    Raises:
        ConfigurationError: Only when `strict` is set and map data is invalid.
    """
    if not from_id or not to_id or from_id == to_id:
        return NavigationResult(status="same_location")

    if not map_data.corridors:
        logger.warning("No corridor data available for route planning")
        return NavigationResult(status="no_data", directions=[NO_DATA_MESSAGE])

    if from_id == CURRENT_LOCATION_ID:
        if current_position is None or not is_finite_position(current_position):
            logger.warning("Invalid player position for route planning: %s", current_position)
            return NavigationResult(status="invalid_position", directions=[INVALID_PLAYER_MESSAGE])
        start_pos: Position3 | None = current_position
    else:
        start_pos = map_data.position_by_id(from_id)

    goal_pos = map_data.position_by_id(to_id)
    if start_pos is None or goal_pos is None:
        return NavigationResult(status="unknown_location", directions=[UNKNOWN_LOCATION_MESSAGE])

    if not (is_finite_position(start_pos) and is_finite_position(goal_pos)):
        logger.warning("Non-finite positions for route %s -> %s", from_id, to_id)
        return NavigationResult(status="invalid_position", directions=[INVALID_POSITION_MESSAGE])

    start = planar(start_pos)
    goal = planar(goal_pos)

    result = find_path_result(
        map_data.corridors,
        map_data.rooms,
        start,
        goal,
        max_iterations=max_iterations,
        room_link_radius=room_link_radius,
        strict=strict,
    )

    if result.status == "already_there":
        return NavigationResult(status="already_there", start=start, goal=goal, world_path=[start])

    if not result.edge_ids:
        return NavigationResult(status=result.status, directions=[NO_PATH_MESSAGE], start=start, goal=goal)

    geometry = route_polyline(result.edge_ids, map_data.corridors, map_data.rooms, start)
    return NavigationResult(
        status="found",
        path=list(result.edge_ids),
        directions=describe_path(result.edge_ids, map_data.corridors, map_data.rooms, start),
        start=start,
        goal=goal,
        world_path=geometry.points,
        total_length=geometry.total_length,
    )
