"""Unit tests for hospital_nav.corridor_graph."""

from __future__ import annotations

import math

import pytest

from hospital_nav.corridor_graph import (
    AdjacencyEntry,
    build_corridor_graph,
    graph_summary,
    position_key,
    validate_graph_inputs,
)
from hospital_nav.models import ConfigurationError, Corridor, Room


def test_position_key_ignores_height() -> None:
    assert position_key((1.5, 9.0, -2.0)) == (1.5, -2.0)
    assert position_key((1, 0, 2)) == position_key((1.0, 3.0, 2.0))


def test_corridor_registers_both_directions(l_corridors: list[Corridor]) -> None:
    """Each corridor adds one entry at each endpoint pointing at the other."""
    graph = build_corridor_graph(l_corridors, [])

    assert graph[(0.0, 0.0)] == [AdjacencyEntry("A", "corridor", (10.0, 0.0, 0.0))]
    assert graph[(10.0, 10.0)] == [AdjacencyEntry("B", "corridor", (10.0, 0.0, 0.0))]
    assert [e.edge_id for e in graph[(10.0, 0.0)]] == ["A", "B"]


def test_shared_endpoints_keep_parallel_edges() -> None:
    """Two corridors over the same endpoints are not deduplicated."""
    corridors = [
        Corridor("P1", (0.0, 0.0, 0.0), (5.0, 0.0, 0.0)),
        Corridor("P2", (0.0, 0.0, 0.0), (5.0, 0.0, 0.0)),
    ]
    graph = build_corridor_graph(corridors, [])

    assert [e.edge_id for e in graph[(0.0, 0.0)]] == ["P1", "P2"]
    assert [e.edge_id for e in graph[(5.0, 0.0)]] == ["P1", "P2"]


def test_near_but_not_identical_endpoints_do_not_join() -> None:
    corridors = [
        Corridor("A", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0)),
        Corridor("B", (10.001, 0.0, 0.0), (20.0, 0.0, 0.0)),
    ]
    graph = build_corridor_graph(corridors, [])

    assert [e.edge_id for e in graph[(10.0, 0.0)]] == ["A"]
    assert [e.edge_id for e in graph[(10.001, 0.0)]] == ["B"]


def test_isolated_room_is_still_a_node() -> None:
    graph = build_corridor_graph([], [Room("R", "Lonely", (3.0, 0.0, 3.0))])

    assert graph == {(3.0, 3.0): []}


def test_room_near_corridor_start_links_both_ways() -> None:
    """Room next to the start enters the corridor toward its end and is reachable from the start."""
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    room = Room("R", "Ward", (0.0, 0.0, 0.5))
    graph = build_corridor_graph([corridor], [room])

    assert graph[(0.0, 0.5)] == [AdjacencyEntry("C", "corridor", (10.0, 0.0, 0.0))]
    assert graph[(0.0, 0.0)][-1] == AdjacencyEntry("R", "room", (0.0, 0.0, 0.5))
    assert graph[(10.0, 0.0)] == [AdjacencyEntry("C", "corridor", (0.0, 0.0, 0.0))]


def test_room_near_corridor_end_links_toward_start() -> None:
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    room = Room("R", "Ward", (10.99, 0.0, 0.0))
    graph = build_corridor_graph([corridor], [room])

    assert graph[(10.99, 0.0)] == [AdjacencyEntry("C", "corridor", (0.0, 0.0, 0.0))]
    assert graph[(10.0, 0.0)][-1] == AdjacencyEntry("R", "room", (10.99, 0.0, 0.0))


def test_room_link_radius_is_strict() -> None:
    """A room exactly at the radius does not link."""
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    graph = build_corridor_graph([corridor], [Room("R", "Edge", (11.0, 0.0, 0.0))])

    assert graph[(11.0, 0.0)] == []
    assert all(e.edge_kind == "corridor" for e in graph[(10.0, 0.0)])


def test_room_link_radius_is_configurable() -> None:
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    graph = build_corridor_graph([corridor], [Room("R", "Far", (12.0, 0.0, 0.0))], room_link_radius=2.5)

    assert [e.edge_id for e in graph[(12.0, 0.0)]] == ["C"]


def test_nan_coordinates_degrade_without_raising() -> None:
    corridors = [Corridor("N", (math.nan, 0.0, 0.0), (1.0, 0.0, 0.0))]
    rooms = [Room("R", "Room", (1.2, 0.0, 0.0))]

    graph = build_corridor_graph(corridors, rooms)

    assert graph_summary(graph)["node_count"] == 3


def test_strict_mode_rejects_id_shared_by_corridor_and_room() -> None:
    corridors = [Corridor("X", (0.0, 0.0, 0.0), (1.0, 0.0, 0.0))]
    rooms = [Room("X", "Clash", (1.0, 0.0, 0.0))]

    with pytest.raises(ConfigurationError, match="already used by a corridor"):
        build_corridor_graph(corridors, rooms, strict=True)


def test_strict_mode_rejects_non_finite_coordinates() -> None:
    with pytest.raises(ConfigurationError, match="non-finite"):
        validate_graph_inputs([Corridor("A", (0.0, 0.0, math.inf), (1.0, 0.0, 0.0))], [])


def test_strict_mode_rejects_blank_ids() -> None:
    with pytest.raises(ConfigurationError, match="non-empty"):
        validate_graph_inputs([], [Room(" ", "Blank", (0.0, 0.0, 0.0))])


def test_graph_summary_counts() -> None:
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    graph = build_corridor_graph([corridor], [Room("R", "Far", (50.0, 0.0, 0.0))])

    assert graph_summary(graph) == {"node_count": 3, "entry_count": 2, "isolated_count": 1}
