"""Breadth-first route search over the corridor graph.

Purpose:
- Find a route with the fewest corridor/room hops between two world points.
- Return the traversed edge IDs; an empty list means there is no route.

Usage example:
    >>> from hospital_nav.models import Corridor
    >>> corridors = [Corridor("A", (0, 0, 0), (10, 0, 0)), Corridor("B", (10, 0, 0), (10, 0, 10))]
    >>> find_path(corridors, [], (0, 0, 0), (10, 0, 10))
    ['A', 'B']
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Literal

from hospital_nav.corridor_graph import ROOM_LINK_RADIUS, CorridorGraph, build_corridor_graph, position_key
from hospital_nav.models import Corridor, Position3, Room, planar

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000
GOAL_TOLERANCE = 0.01

SearchStatus = Literal["found", "already_there", "unreachable", "iteration_limit"]


@dataclass(slots=True)
class PathSearchResult:
    """Outcome of one BFS run."""

    status: SearchStatus
    edge_ids: list[str] = field(default_factory=list)
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.status in ("found", "already_there")


def positions_equal(a: Position3, b: Position3, tolerance: float = GOAL_TOLERANCE) -> bool:
    """Loose XZ equality used for goal tests, never for graph keys."""
    return abs(float(a[0]) - float(b[0])) < tolerance and abs(float(a[2]) - float(b[2])) < tolerance


def search_corridor_graph(
    graph: CorridorGraph,
    start: Position3,
    goal: Position3,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> PathSearchResult:
    """Run BFS from `start` until a dequeued node matches `goal`.

    Nodes are marked visited when dequeued, so the first path to reach a node
    wins and later copies of it are dropped when they come off the queue.
    Hitting `max_iterations` counts as `iteration_limit` only while nodes are
    still queued; a queue that empties on the last allowed dequeue is
    `unreachable`.

    Args:
        graph: Adjacency map from `build_corridor_graph`.
        start: Start world position; `y` is ignored.
        goal: Goal world position; matched within `GOAL_TOLERANCE`.
        max_iterations: Dequeue budget before giving up.

    Returns:
        PathSearchResult with status and edge IDs.

    Raises:
        ValueError: If `max_iterations` is not positive.
    """
    if max_iterations <= 0:
        raise ValueError("max_iterations must be > 0")

    target = planar(goal)
    queue: deque[tuple[Position3, list[str]]] = deque([(planar(start), [])])
    visited: set[tuple[float, float]] = set()
    iterations = 0

    while queue and iterations < max_iterations:
        iterations += 1
        pos, path = queue.popleft()
        key = position_key(pos)

        if positions_equal(pos, target):
            logger.debug("Route found after %d iterations (%d hops)", iterations, len(path))
            return PathSearchResult(
                status="found" if path else "already_there",
                edge_ids=path,
                iterations=iterations,
            )

        if key in visited:
            continue
        visited.add(key)

        for entry in graph.get(key, []):
            next_pos = planar(entry.next_position)
            next_key = position_key(next_pos)
            if next_key != key and next_key not in visited:
                queue.append((next_pos, [*path, entry.edge_id]))

    if queue:
        logger.warning(
            "Route search stopped after %d iterations with %d queued nodes; returning empty path",
            iterations,
            len(queue),
        )
        return PathSearchResult(status="iteration_limit", iterations=iterations)

    return PathSearchResult(status="unreachable", iterations=iterations)


def find_path_result(
    corridors: list[Corridor],
    rooms: list[Room],
    start: Position3,
    end: Position3,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    room_link_radius: float = ROOM_LINK_RADIUS,
    strict: bool = False,
) -> PathSearchResult:
    """Build a fresh graph from the given snapshot and search it."""
    graph = build_corridor_graph(corridors, rooms, room_link_radius=room_link_radius, strict=strict)
    return search_corridor_graph(graph, start, end, max_iterations=max_iterations)


def find_path(
    corridors: list[Corridor],
    rooms: list[Room],
    start: Position3,
    end: Position3,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    room_link_radius: float = ROOM_LINK_RADIUS,
    strict: bool = False,
) -> list[str]:
    """Return corridor/room IDs from `start` to `end`, or `[]`.

    An empty list covers both "no route" and "already there"; use
    `find_path_result` when the caller needs to tell them apart.
    """
    result = find_path_result(
        corridors,
        rooms,
        start,
        end,
        max_iterations=max_iterations,
        room_link_radius=room_link_radius,
        strict=strict,
    )
    return list(result.edge_ids)
