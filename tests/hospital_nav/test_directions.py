"""Unit tests for hospital_nav.directions."""

from __future__ import annotations

import logging

import pytest

from hospital_nav.directions import NO_PATH_MESSAGE, describe_path, format_position
from hospital_nav.models import Corridor, Room


def test_empty_route_reports_no_path(l_corridors: list[Corridor]) -> None:
    assert describe_path([], l_corridors, [], (0.0, 0.0, 0.0)) == [NO_PATH_MESSAGE]


def test_corridor_steps_chain_from_start(l_corridors: list[Corridor]) -> None:
    steps = describe_path(["A", "B"], l_corridors, [], (0.0, 0.0, 0.0))

    assert steps == [
        "Take corridor A from (0, 0) to (10, 0)",
        "Take corridor B from (10, 0) to (10, 10)",
    ]


def test_room_step_uses_room_name_and_position() -> None:
    corridor = Corridor("C", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    room = Room("R", "Pharmacy", (10.5, 0.0, 0.25))

    steps = describe_path(["C", "R"], [corridor], [room], (0.0, 0.0, 0.0))

    assert steps[-1] == "Enter room Pharmacy at (10.5, 0.25)"


def test_corridor_after_room_starts_at_room() -> None:
    corridors = [
        Corridor("A", (0.0, 0.0, 0.0), (5.0, 0.0, 0.0)),
        Corridor("B", (5.5, 0.0, 0.0), (10.0, 0.0, 0.0)),
    ]
    rooms = [Room("R", "Waiting", (5.25, 0.0, 0.0))]

    steps = describe_path(["A", "R", "B"], corridors, rooms, (0.0, 0.0, 0.0))

    assert steps[2] == "Take corridor B from (5.25, 0) to (10, 0)"


def test_corridor_ids_win_over_room_ids() -> None:
    corridors = [Corridor("X", (0.0, 0.0, 0.0), (1.0, 0.0, 0.0))]
    rooms = [Room("X", "Shadowed", (1.0, 0.0, 0.0))]

    assert describe_path(["X"], corridors, rooms, (0.0, 0.0, 0.0)) == ["Take corridor X from (0, 0) to (1, 0)"]


def test_unknown_ids_are_skipped_with_warning(
    l_corridors: list[Corridor], caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="hospital_nav.directions"):
        steps = describe_path(["A", "ghost", "B"], l_corridors, [], (0.0, 0.0, 0.0))

    assert len(steps) == 2
    assert "ghost" in caplog.text


def test_format_position_drops_height() -> None:
    assert format_position((1.25, 7.0, -3.0)) == "(1.25, -3)"
