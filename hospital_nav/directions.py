"""Turn a route's edge IDs into step-by-step text for the directions panel."""

from __future__ import annotations

import logging

from hospital_nav.models import Corridor, Position3, Room

logger = logging.getLogger(__name__)

NO_PATH_MESSAGE = "No path found between the selected locations."


def format_position(pos: Position3) -> str:
    """Render the routing-plane part of a position, e.g. `(10, 0.5)`."""
    return f"({float(pos[0]):g}, {float(pos[2]):g})"


def _first_by_id(items: list) -> dict:
    lookup: dict = {}
    for item in items:
        lookup.setdefault(item.id, item)
    return lookup


def describe_path(
    edge_ids: list[str],
    corridors: list[Corridor],
    rooms: list[Room],
    start: Position3,
) -> list[str]:
    """Describe each hop of a route.

    IDs resolve against corridors before rooms. A corridor step runs from the
    previous step's end (the route start for the first step, the corridor end
    after a corridor, the room position after a room) to the corridor end.

    Returns:
        One line per resolvable ID, or a single no-path line for an empty route.
    """
    if not edge_ids:
        return [NO_PATH_MESSAGE]

    corridor_map: dict[str, Corridor] = _first_by_id(corridors)
    room_map: dict[str, Room] = _first_by_id(rooms)

    steps: list[str] = []
    previous_end = start
    for edge_id in edge_ids:
        corridor = corridor_map.get(edge_id)
        if corridor is not None:
            steps.append(
                f"Take corridor {corridor.id} from {format_position(previous_end)} "
                f"to {format_position(corridor.end)}"
            )
            previous_end = corridor.end
            continue

        room = room_map.get(edge_id)
        if room is not None:
            steps.append(f"Enter room {room.name} at {format_position(room.position)}")
            previous_end = room.position
            continue

        logger.warning("Route step '%s' matches no corridor or room; skipping", edge_id)

    return steps
