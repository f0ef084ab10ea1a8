"""Pytest global fixtures and test isolation hooks."""

from __future__ import annotations

import pytest

from hospital_nav.api import STATE
from hospital_nav.config import Settings
from hospital_nav.map_data import MapData
from hospital_nav.models import Corridor, Room


@pytest.fixture(autouse=True)
def reset_map_state() -> None:
    """Reset in-memory API map state before each test."""
    STATE.map_data = MapData()
    STATE.settings = Settings()
    STATE.last_route = None


@pytest.fixture()
def l_corridors() -> list[Corridor]:
    """Two corridors forming an L: (0,0) -> (10,0) -> (10,10)."""
    return [
        Corridor("A", (0.0, 0.0, 0.0), (10.0, 0.0, 0.0)),
        Corridor("B", (10.0, 0.0, 0.0), (10.0, 0.0, 10.0)),
    ]


@pytest.fixture()
def small_map(l_corridors: list[Corridor]) -> MapData:
    """L-shaped corridor map with one bridged room near the far corner."""
    return MapData(
        corridors=list(l_corridors),
        rooms=[Room("R1", "Radiology", (10.0, 0.0, 10.5), building_id="b1")],
    )
