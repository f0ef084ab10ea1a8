"""Adjacency graph over corridor endpoints and room anchors.

Purpose:
- Join corridors that share an endpoint exactly (no rounding on keys).
- Link rooms to corridor endpoints that lie within a proximity radius.
- Keep insertion order stable so BFS tie-breaks are reproducible.

Usage example:
    >>> from hospital_nav.models import Corridor
    >>> graph = build_corridor_graph([Corridor("A", (0, 0, 0), (10, 0, 0))], [])
    >>> [e.edge_id for e in graph[(0.0, 0.0)]]
    ['A']
"""

from __future__ import annotations

import math

from dataclasses import dataclass
from typing import Iterable

from hospital_nav.models import ConfigurationError, Corridor, EdgeKind, Position3, Room, is_finite_position

ROOM_LINK_RADIUS = 1.0

PositionKey = tuple[float, float]


@dataclass(slots=True, frozen=True)
class AdjacencyEntry:
    """One directed hop leaving a graph node."""

    edge_id: str
    edge_kind: EdgeKind
    next_position: Position3


CorridorGraph = dict[PositionKey, list[AdjacencyEntry]]


def position_key(pos: Position3) -> PositionKey:
    """Return the exact `(x, z)` identity of a position."""
    return float(pos[0]), float(pos[2])


def planar_distance(a: Position3, b: Position3) -> float:
    """Euclidean distance on the XZ plane."""
    return math.hypot(float(a[0]) - float(b[0]), float(a[2]) - float(b[2]))


def validate_graph_inputs(corridors: Iterable[Corridor], rooms: Iterable[Room]) -> None:
    """Fail fast on map data that would silently mis-route.

    Raises:
        ConfigurationError: On empty or shared IDs, or non-finite coordinates.
    """
    seen: dict[str, str] = {}

    def claim(edge_id: str, kind: str) -> None:
        if not str(edge_id).strip():
            raise ConfigurationError(f"{kind} id must be a non-empty string")
        if edge_id in seen:
            raise ConfigurationError(f"{kind} id '{edge_id}' is already used by a {seen[edge_id]}")
        seen[edge_id] = kind

    for corridor in corridors:
        claim(corridor.id, "corridor")
        if not (is_finite_position(corridor.start) and is_finite_position(corridor.end)):
            raise ConfigurationError(f"corridor '{corridor.id}' has non-finite coordinates")

    for room in rooms:
        claim(room.id, "room")
        if not is_finite_position(room.position):
            raise ConfigurationError(f"room '{room.id}' has non-finite coordinates")


def build_corridor_graph(
    corridors: list[Corridor],
    rooms: list[Room],
    *,
    room_link_radius: float = ROOM_LINK_RADIUS,
    strict: bool = False,
) -> CorridorGraph:
    """Build the undirected multi-edge adjacency map used by path search.

    Args:
        corridors: Corridor segments; each contributes one entry per direction.
        rooms: Room anchors; each gets a node even when nothing links to it.
        room_link_radius: Rooms strictly closer than this to a corridor
            endpoint are linked to that endpoint.
        strict: Run `validate_graph_inputs` before building.

    Returns:
        Mapping from position key to outgoing adjacency entries.
    """
    if strict:
        validate_graph_inputs(corridors, rooms)

    graph: CorridorGraph = {}

    for corridor in corridors:
        start_key = position_key(corridor.start)
        end_key = position_key(corridor.end)
        graph.setdefault(start_key, [])
        graph.setdefault(end_key, [])
        graph[start_key].append(AdjacencyEntry(corridor.id, "corridor", corridor.end))
        graph[end_key].append(AdjacencyEntry(corridor.id, "corridor", corridor.start))

    for room in rooms:
        room_key = position_key(room.position)
        graph.setdefault(room_key, [])

        for corridor in corridors:
            # Room behaves as a pass-through: leave it along the corridor, or
            # arrive at it from the endpoint it sits next to.
            if planar_distance(room.position, corridor.start) < room_link_radius:
                graph[room_key].append(AdjacencyEntry(corridor.id, "corridor", corridor.end))
                graph[position_key(corridor.start)].append(AdjacencyEntry(room.id, "room", room.position))

            if planar_distance(room.position, corridor.end) < room_link_radius:
                graph[room_key].append(AdjacencyEntry(corridor.id, "corridor", corridor.start))
                graph[position_key(corridor.end)].append(AdjacencyEntry(room.id, "room", room.position))

    return graph


def graph_summary(graph: CorridorGraph) -> dict[str, int]:
    """Node/entry counts for diagnostics."""
    return {
        "node_count": len(graph),
        "entry_count": sum(len(entries) for entries in graph.values()),
        "isolated_count": sum(1 for entries in graph.values() if not entries),
    }
