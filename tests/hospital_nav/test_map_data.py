"""Unit tests for hospital_nav.map_data."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hospital_nav.map_data import (
    MapData,
    export_map_payload,
    list_locations,
    load_map_file,
    parse_map_payload,
    save_map_file,
)
from hospital_nav.models import Building, Corridor, Room


def _payload() -> dict:
    return {
        "buildings": [{"id": "b1", "name": "Main", "position": [1, 0, 1], "hasRooms": True}],
        "corridors": [{"id": "c1", "start": [0, 0, 0], "end": [5, 0, 0], "width": 2}],
        "rooms": [{"id": "r1", "name": "ICU", "position": [5, 0, 0.5], "buildingId": "b1"}],
    }


def test_parse_map_payload_accepts_camel_case_keys() -> None:
    map_data = parse_map_payload(_payload())

    assert map_data.buildings[0].has_rooms is True
    assert map_data.rooms[0].building_id == "b1"
    assert map_data.corridors[0] == Corridor("c1", (0.0, 0.0, 0.0), (5.0, 0.0, 0.0), 2.0)


def test_parse_map_payload_missing_sections_are_empty() -> None:
    assert parse_map_payload({}).stats() == {"buildings": 0, "corridors": 0, "rooms": 0}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "JSON object"),
        ({"corridors": {}}, "corridors must be a JSON list"),
        ({"corridors": [{"id": "c1", "start": [0, 0, 0]}]}, r"corridor\[0\] must include"),
        ({"corridors": [{"id": "c1", "start": [0, 0], "end": [1, 0, 0]}]}, r"corridor\[0\]\.start must be \[x,y,z\]"),
        ({"corridors": [{"id": "c1", "start": [0, 0, 0], "end": [1, 0, 0], "width": 0}]}, "width must be > 0"),
        ({"rooms": ["not-an-object"]}, r"room\[0\] must be an object"),
        ({"buildings": [{"id": "b", "name": "B", "position": ["a", 0, 0]}]}, "must contain numbers"),
    ],
)
def test_parse_map_payload_rejects_malformed_entries(payload: object, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        parse_map_payload(payload)


def test_position_by_id_prefers_buildings_then_rooms_then_corridor_start() -> None:
    map_data = parse_map_payload(_payload())

    assert map_data.position_by_id("b1") == (1.0, 0.0, 1.0)
    assert map_data.position_by_id("r1") == (5.0, 0.0, 0.5)
    assert map_data.position_by_id("c1") == (0.0, 0.0, 0.0)
    assert map_data.position_by_id("missing") is None


def test_add_room_defaults_to_first_room_hosting_building() -> None:
    map_data = MapData(
        buildings=[
            Building("b0", "Parking", (0.0, 0.0, 0.0)),
            Building("b1", "Ward", (5.0, 0.0, 0.0), has_rooms=True),
        ]
    )

    room = map_data.add_room(Room("r1", "ICU", (5.0, 0.0, 1.0)))

    assert room.building_id == "b1"


def test_add_room_marks_building_as_hosting_rooms() -> None:
    map_data = MapData(buildings=[Building("b0", "Annex", (0.0, 0.0, 0.0))])

    map_data.add_room(Room("r1", "Store", (0.0, 0.0, 1.0), building_id="b0"))

    assert map_data.get_building("b0").has_rooms is True


def test_add_rejects_ids_used_anywhere_on_the_map() -> None:
    map_data = MapData(corridors=[Corridor("x", (0.0, 0.0, 0.0), (1.0, 0.0, 0.0))])

    with pytest.raises(ValueError, match="already exists"):
        map_data.add_room(Room("x", "Clash", (0.0, 0.0, 0.0)))


def test_remove_reports_whether_anything_was_removed() -> None:
    map_data = parse_map_payload(_payload())

    assert map_data.remove_corridor("c1") is True
    assert map_data.remove_corridor("c1") is False
    assert map_data.remove_room("r1") is True
    assert map_data.remove_building("b1") is True
    assert map_data.stats() == {"buildings": 0, "corridors": 0, "rooms": 0}


def test_export_then_parse_preserves_entities() -> None:
    original = parse_map_payload(_payload())
    exported = export_map_payload(original)

    assert "exported_at" in exported
    assert exported["rooms"][0]["building_id"] == "b1"
    assert parse_map_payload(exported) == original


def test_save_and_load_map_file(tmp_path: Path) -> None:
    target = tmp_path / "maps" / "campus.json"
    out = save_map_file(parse_map_payload(_payload()), target)

    assert Path(out).exists()
    assert load_map_file(target).stats() == {"buildings": 1, "corridors": 1, "rooms": 1}


def test_load_map_file_rejects_invalid_json(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid JSON"):
        load_map_file(bad)


def test_list_locations_orders_buildings_rooms_corridors() -> None:
    locations = list_locations(parse_map_payload(_payload()))

    assert [(loc["id"], loc["type"]) for loc in locations] == [
        ("b1", "building"),
        ("r1", "room"),
        ("c1", "corridor"),
    ]
    assert locations[2]["position"] == [0.0, 0.0, 0.0]


def test_sample_map_asset_parses() -> None:
    payload = json.loads(Path("assets/sample_map.json").read_text(encoding="utf-8"))

    assert parse_map_payload(payload).stats() == {"buildings": 2, "corridors": 8, "rooms": 6}
