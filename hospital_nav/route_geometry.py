"""Polyline reconstruction for highlighted routes.

The search only returns IDs; renderers need the walked points. Each corridor
step is replayed toward the endpoint farther from the current point, which is
the other endpoint for exact joins and the far end when entering from a room.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from hospital_nav.corridor_graph import planar_distance
from hospital_nav.models import Corridor, Position3, Room, planar


@dataclass(slots=True)
class RouteGeometry:
    """Ordered route points and their summed XZ length in meters."""

    points: list[Position3]
    total_length: float


def polyline_length(points: list[Position3]) -> float:
    """Sum XZ segment lengths of a polyline."""
    if len(points) < 2:
        return 0.0
    xz = np.asarray([(p[0], p[2]) for p in points], dtype=float)
    return float(np.linalg.norm(np.diff(xz, axis=0), axis=1).sum())


def route_polyline(
    edge_ids: list[str],
    corridors: list[Corridor],
    rooms: list[Room],
    start: Position3,
) -> RouteGeometry:
    """Replay a route from `start` and collect its turning points."""
    corridor_map: dict[str, Corridor] = {}
    for corridor in corridors:
        corridor_map.setdefault(corridor.id, corridor)
    room_map: dict[str, Room] = {}
    for room in rooms:
        room_map.setdefault(room.id, room)

    current = planar(start)
    points: list[Position3] = [current]

    for edge_id in edge_ids:
        if edge_id in corridor_map:
            corridor = corridor_map[edge_id]
            if planar_distance(current, corridor.start) >= planar_distance(current, corridor.end):
                nxt = planar(corridor.start)
            else:
                nxt = planar(corridor.end)
        elif edge_id in room_map:
            nxt = planar(room_map[edge_id].position)
        else:
            continue

        if nxt != current:
            points.append(nxt)
        current = nxt

    return RouteGeometry(points=points, total_length=polyline_length(points))


def to_world_path(points: list[Position3]) -> list[dict[str, float]]:
    """Convert points to JSON-friendly `{x, y, z}` dictionaries."""
    return [{"x": float(p[0]), "y": float(p[1]), "z": float(p[2])} for p in points]
