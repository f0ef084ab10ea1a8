"""Map data quality checks run before corridor data is trusted for routing."""

from __future__ import annotations

from typing import Any

from shapely.geometry import LineString, Point

from hospital_nav.corridor_graph import ROOM_LINK_RADIUS, planar_distance, position_key
from hospital_nav.map_data import MapData
from hospital_nav.models import is_finite_position


def _corridor_line(start: tuple, end: tuple) -> LineString:
    return LineString([(float(start[0]), float(start[2])), (float(end[0]), float(end[2]))])


def _endpoint_set(line: LineString, precision: int = 4) -> set[tuple[float, float]]:
    coords = list(line.coords)
    a = (round(float(coords[0][0]), precision), round(float(coords[0][1]), precision))
    b = (round(float(coords[-1][0]), precision), round(float(coords[-1][1]), precision))
    return {a, b}


def validate_map(
    map_data: MapData,
    room_link_radius: float = ROOM_LINK_RADIUS,
    near_miss_tolerance: float = 0.05,
) -> dict[str, Any]:
    """Validate ID uniqueness, coordinates and corridor/room connectivity."""
    issues: list[dict[str, Any]] = []

    owners: dict[str, str] = {}
    for kind, items in (
        ("building", map_data.buildings),
        ("corridor", map_data.corridors),
        ("room", map_data.rooms),
    ):
        for item in items:
            if item.id in owners:
                issues.append(
                    {
                        "kind": "duplicate_id",
                        "severity": "error",
                        "id": item.id,
                        "message": f"{kind} id '{item.id}' is already used by a {owners[item.id]}",
                    }
                )
            else:
                owners[item.id] = kind

    corridors = []
    for corridor in map_data.corridors:
        if not (is_finite_position(corridor.start) and is_finite_position(corridor.end)):
            issues.append(
                {
                    "kind": "non_finite_coordinate",
                    "severity": "error",
                    "id": corridor.id,
                    "message": "Corridor has non-finite coordinates",
                }
            )
            continue
        if position_key(corridor.start) == position_key(corridor.end):
            issues.append(
                {
                    "kind": "zero_length_corridor",
                    "severity": "warning",
                    "id": corridor.id,
                    "message": "Corridor start and end coincide",
                }
            )
            continue
        corridors.append(corridor)

    rooms = []
    for room in map_data.rooms:
        if not is_finite_position(room.position):
            issues.append(
                {
                    "kind": "non_finite_coordinate",
                    "severity": "error",
                    "id": room.id,
                    "message": "Room has non-finite coordinates",
                }
            )
            continue
        rooms.append(room)

    # Endpoints that nearly coincide will not join: graph keys match exactly.
    endpoints: list[tuple[str, tuple[float, float]]] = []
    for corridor in corridors:
        endpoints.append((corridor.id, position_key(corridor.start)))
        endpoints.append((corridor.id, position_key(corridor.end)))

    near_miss_checks = 0
    reported: set[tuple[tuple[float, float], tuple[float, float]]] = set()
    for i in range(len(endpoints)):
        id_a, key_a = endpoints[i]
        for j in range(i + 1, len(endpoints)):
            id_b, key_b = endpoints[j]
            if id_a == id_b or key_a == key_b:
                continue
            near_miss_checks += 1
            gap = float(Point(key_a).distance(Point(key_b)))
            pair = (min(key_a, key_b), max(key_a, key_b))
            if gap < near_miss_tolerance and pair not in reported:
                reported.add(pair)
                issues.append(
                    {
                        "kind": "endpoint_near_miss",
                        "severity": "warning",
                        "corridor_a": id_a,
                        "corridor_b": id_b,
                        "gap_m": gap,
                        "message": f"Endpoints are {gap:.4f}m apart but not identical; corridors will not connect",
                    }
                )

    lines = [(c.id, _corridor_line(c.start, c.end)) for c in corridors]
    crossing_checks = 0
    for i in range(len(lines)):
        id_a, line_a = lines[i]
        for j in range(i + 1, len(lines)):
            id_b, line_b = lines[j]
            crossing_checks += 1
            if not line_a.intersects(line_b):
                continue

            inter = line_a.intersection(line_b)
            if inter.is_empty:
                continue

            shared = _endpoint_set(line_a) & _endpoint_set(line_b)
            if inter.geom_type == "Point":
                p = (round(float(inter.x), 4), round(float(inter.y), 4))
                if p in shared:
                    continue

            issues.append(
                {
                    "kind": "corridor_crossing",
                    "severity": "warning",
                    "corridor_a": id_a,
                    "corridor_b": id_b,
                    "message": "Corridors cross away from shared endpoints; no junction is created",
                }
            )

    for room in rooms:
        if any(
            planar_distance(room.position, end) < room_link_radius
            for corridor in corridors
            for end in (corridor.start, corridor.end)
        ):
            continue
        issues.append(
            {
                "kind": "isolated_room",
                "severity": "warning",
                "id": room.id,
                "message": f"Room is not within {room_link_radius:.2f}m of any corridor endpoint",
            }
        )

    error_count = sum(1 for issue in issues if issue.get("severity") == "error")
    warning_count = sum(1 for issue in issues if issue.get("severity") == "warning")

    return {
        "ok": error_count == 0,
        "summary": {
            "corridors": len(map_data.corridors),
            "rooms": len(map_data.rooms),
            "near_miss_checks": near_miss_checks,
            "crossing_checks": crossing_checks,
            "errors": error_count,
            "warnings": warning_count,
        },
        "issues": issues,
    }
