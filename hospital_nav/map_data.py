"""Editable campus map data: parsing, export, lookups and CRUD.

Expected import schema:
  {
    "buildings": [{"id", "name", "position": [x,y,z], "size": [x,y,z], "has_rooms"}],
    "corridors": [{"id", "start": [x,y,z], "end": [x,y,z], "width"}],
    "rooms": [{"id", "name", "position": [x,y,z], "size": [x,y,z], "building_id", "image"}]
  }

camelCase keys (`buildingId`, `hasRooms`) from older browser exports are
accepted on import.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from hospital_nav.models import Building, Corridor, LocationKind, Position3, Room, as_position
from hospital_nav.utils import to_position_list

logger = logging.getLogger(__name__)


def _require(item: Any, idx: int, label: str, keys: set[str]) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise ValueError(f"{label}[{idx}] must be an object")
    if not keys.issubset(item.keys()):
        raise ValueError(f"{label}[{idx}] must include {', '.join(sorted(keys))}")
    return item


def parse_corridor(item: Any, idx: int = 0) -> Corridor:
    data = _require(item, idx, "corridor", {"id", "start", "end"})
    try:
        width = float(data.get("width", 1.0))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"corridor[{idx}].width must be a number") from exc
    if not width > 0:
        raise ValueError(f"corridor[{idx}].width must be > 0")
    return Corridor(
        id=str(data["id"]),
        start=as_position(data["start"], f"corridor[{idx}].start"),
        end=as_position(data["end"], f"corridor[{idx}].end"),
        width=width,
    )


def parse_room(item: Any, idx: int = 0) -> Room:
    data = _require(item, idx, "room", {"id", "name", "position"})
    size = data.get("size")
    image = data.get("image")
    return Room(
        id=str(data["id"]),
        name=str(data["name"]),
        position=as_position(data["position"], f"room[{idx}].position"),
        size=as_position(size, f"room[{idx}].size") if size is not None else (1.5, 0.2, 1.5),
        building_id=str(data.get("building_id", data.get("buildingId", "")) or ""),
        image=str(image) if image else None,
    )


def parse_building(item: Any, idx: int = 0) -> Building:
    data = _require(item, idx, "building", {"id", "name", "position"})
    size = data.get("size")
    color = data.get("color")
    return Building(
        id=str(data["id"]),
        name=str(data["name"]),
        position=as_position(data["position"], f"building[{idx}].position"),
        size=as_position(size, f"building[{idx}].size") if size is not None else (4.0, 3.0, 4.0),
        has_rooms=bool(data.get("has_rooms", data.get("hasRooms", False))),
        color=str(color) if color else None,
    )


@dataclass
class MapData:
    """In-memory snapshot of the editable map."""

    buildings: list[Building] = field(default_factory=list)
    corridors: list[Corridor] = field(default_factory=list)
    rooms: list[Room] = field(default_factory=list)

    def get_building(self, building_id: str) -> Building | None:
        return next((b for b in self.buildings if b.id == building_id), None)

    def get_room(self, room_id: str) -> Room | None:
        return next((r for r in self.rooms if r.id == room_id), None)

    def get_corridor(self, corridor_id: str) -> Corridor | None:
        return next((c for c in self.corridors if c.id == corridor_id), None)

    def position_by_id(self, location_id: str) -> Position3 | None:
        """Resolve a selectable ID to the point routing starts from.

        Buildings win over rooms, rooms over corridors; a corridor resolves to
        its start point.
        """
        building = self.get_building(location_id)
        if building is not None:
            return building.position
        room = self.get_room(location_id)
        if room is not None:
            return room.position
        corridor = self.get_corridor(location_id)
        if corridor is not None:
            return corridor.start
        return None

    def _id_taken(self, item_id: str) -> bool:
        return any(
            item.id == item_id for item in (*self.buildings, *self.corridors, *self.rooms)
        )

    def add_building(self, building: Building) -> Building:
        if self._id_taken(building.id):
            raise ValueError(f"id '{building.id}' already exists")
        self.buildings.append(building)
        return building

    def add_corridor(self, corridor: Corridor) -> Corridor:
        if self._id_taken(corridor.id):
            raise ValueError(f"id '{corridor.id}' already exists")
        self.corridors.append(corridor)
        return corridor

    def add_room(self, room: Room) -> Room:
        """Add a room, defaulting its building to the first one that hosts rooms."""
        if self._id_taken(room.id):
            raise ValueError(f"id '{room.id}' already exists")

        if not room.building_id:
            host = next((b for b in self.buildings if b.has_rooms), None)
            if host is not None:
                room = replace(room, building_id=host.id)

        if room.building_id:
            self.buildings = [
                replace(b, has_rooms=True) if b.id == room.building_id and not b.has_rooms else b
                for b in self.buildings
            ]

        self.rooms.append(room)
        return room

    def remove_building(self, building_id: str) -> bool:
        before = len(self.buildings)
        self.buildings = [b for b in self.buildings if b.id != building_id]
        return len(self.buildings) != before

    def remove_corridor(self, corridor_id: str) -> bool:
        before = len(self.corridors)
        self.corridors = [c for c in self.corridors if c.id != corridor_id]
        return len(self.corridors) != before

    def remove_room(self, room_id: str) -> bool:
        before = len(self.rooms)
        self.rooms = [r for r in self.rooms if r.id != room_id]
        return len(self.rooms) != before

    def clear(self) -> None:
        self.buildings = []
        self.corridors = []
        self.rooms = []

    def stats(self) -> dict[str, int]:
        return {
            "buildings": len(self.buildings),
            "corridors": len(self.corridors),
            "rooms": len(self.rooms),
        }


def parse_map_payload(payload: Any) -> MapData:
    """Validate and parse an imported map document.

    Raises:
        ValueError: If the document or any entry is malformed.
    """
    if not isinstance(payload, dict):
        raise ValueError("Map payload must be a JSON object")

    sections: dict[str, list[Any]] = {}
    for name in ("buildings", "corridors", "rooms"):
        raw = payload.get(name)
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            raise ValueError(f"{name} must be a JSON list")
        sections[name] = raw

    return MapData(
        buildings=[parse_building(item, idx) for idx, item in enumerate(sections["buildings"])],
        corridors=[parse_corridor(item, idx) for idx, item in enumerate(sections["corridors"])],
        rooms=[parse_room(item, idx) for idx, item in enumerate(sections["rooms"])],
    )


def serialize_corridor(corridor: Corridor) -> dict[str, Any]:
    return {
        "id": corridor.id,
        "start": to_position_list(corridor.start),
        "end": to_position_list(corridor.end),
        "width": corridor.width,
    }


def serialize_room(room: Room) -> dict[str, Any]:
    return {
        "id": room.id,
        "name": room.name,
        "position": to_position_list(room.position),
        "size": to_position_list(room.size),
        "building_id": room.building_id,
        "image": room.image,
    }


def serialize_building(building: Building) -> dict[str, Any]:
    return {
        "id": building.id,
        "name": building.name,
        "position": to_position_list(building.position),
        "size": to_position_list(building.size),
        "has_rooms": building.has_rooms,
        "color": building.color,
    }


def export_map_payload(map_data: MapData) -> dict[str, Any]:
    """Serialize map data into the import schema plus an export timestamp."""
    return {
        "buildings": [serialize_building(b) for b in map_data.buildings],
        "corridors": [serialize_corridor(c) for c in map_data.corridors],
        "rooms": [serialize_room(r) for r in map_data.rooms],
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }


def load_map_file(path: str | Path) -> MapData:
    """Load a JSON map document from disk."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{source} is not valid JSON") from exc

    map_data = parse_map_payload(payload)
    logger.info("Loaded map %s: %s", source, map_data.stats())
    return map_data


def save_map_file(map_data: MapData, path: str | Path) -> str:
    """Write map data as pretty-printed JSON and return the path."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(export_map_payload(map_data), f, indent=2)
    return str(output)


def list_locations(map_data: MapData) -> list[dict[str, Any]]:
    """Selectable route endpoints in selector order: buildings, rooms, corridors."""
    locations: list[dict[str, Any]] = []

    def add(item_id: str, kind: LocationKind, name: str, pos: Position3) -> None:
        locations.append({"id": item_id, "type": kind, "name": name, "position": to_position_list(pos)})

    for building in map_data.buildings:
        add(building.id, "building", building.name, building.position)
    for room in map_data.rooms:
        add(room.id, "room", room.name, room.position)
    for corridor in map_data.corridors:
        add(corridor.id, "corridor", corridor.id, corridor.start)
    return locations
