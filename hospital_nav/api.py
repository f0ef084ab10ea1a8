"""FastAPI routes for campus map editing and corridor routing.

Routes fall into three groups:
- Map data (`/map`, `/locations`, `/corridors`, `/rooms`, `/buildings`)
- Routing (`/find-path`, `/find-corridor-path`, `/route`)
- Geo helpers (`/geo/to-world`, `/geo/to-latlng`)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator

from hospital_nav import __version__
from hospital_nav.config import Settings
from hospital_nav.directions import NO_PATH_MESSAGE
from hospital_nav.map_data import (
    MapData,
    export_map_payload,
    list_locations,
    load_map_file,
    parse_map_payload,
    serialize_building,
    serialize_corridor,
    serialize_room,
)
from hospital_nav.models import Building, ConfigurationError, Corridor, Position3, Room
from hospital_nav.navigation import CURRENT_LOCATION_ID, NavigationResult, plan_route
from hospital_nav.pathfinding import find_path_result
from hospital_nav.route_geometry import to_world_path
from hospital_nav.utils import latlng_to_world, world_to_latlng
from hospital_nav.validation import validate_map

logger = logging.getLogger(__name__)


@dataclass
class MapState:
    """In-memory map snapshot and the latest highlighted route."""

    map_data: MapData = field(default_factory=MapData)
    settings: Settings = field(default_factory=Settings)
    last_route: NavigationResult | None = None


STATE = MapState()


class WorldPoint(BaseModel):
    """World coordinate in meters; `y` is ignored by routing."""

    x: float
    y: float = 0.0
    z: float

    def as_tuple(self) -> Position3:
        return float(self.x), float(self.y), float(self.z)


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class PlanePoint(BaseModel):
    x: float
    z: float


class CorridorPayload(BaseModel):
    id: str = Field(..., min_length=1)
    start: tuple[float, float, float]
    end: tuple[float, float, float]
    width: float = Field(default=1.0, gt=0)


class RoomPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    position: tuple[float, float, float]
    size: tuple[float, float, float] = (1.5, 0.2, 1.5)
    building_id: str = ""
    image: str | None = None


class BuildingPayload(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    position: tuple[float, float, float]
    size: tuple[float, float, float] = (4.0, 3.0, 4.0)
    has_rooms: bool = False
    color: str | None = None


class RouteRequest(BaseModel):
    """Route between two selectable locations.

    `from_id="current"` starts at the player, given either as a world point
    or as a GPS fix.
    """

    from_id: str = Field(..., min_length=1)
    to_id: str = Field(..., min_length=1)
    current_position: WorldPoint | None = None
    current_geo: GeoPoint | None = None

    @model_validator(mode="after")
    def validate_current(self) -> "RouteRequest":
        """Require a player position when routing from the current location."""
        if self.from_id == CURRENT_LOCATION_ID and self.current_position is None and self.current_geo is None:
            raise ValueError("current_position or current_geo is required when from_id is 'current'")
        return self


class RouteResponse(BaseModel):
    status: str
    path: list[str]
    directions: list[str]
    start: WorldPoint | None = None
    goal: WorldPoint | None = None
    world_path: list[dict[str, float]]
    total_length_m: float


class CorridorPathRequest(BaseModel):
    start: WorldPoint
    goal: WorldPoint
    max_iterations: int | None = Field(default=None, gt=0)


class CorridorPathResponse(BaseModel):
    status: str
    path: list[str]
    iterations: int


def _to_world_point(pos: Position3 | None) -> WorldPoint | None:
    if pos is None:
        return None
    return WorldPoint(x=pos[0], y=pos[1], z=pos[2])


def _route_response(result: NavigationResult) -> RouteResponse:
    return RouteResponse(
        status=result.status,
        path=result.path,
        directions=result.directions,
        start=_to_world_point(result.start),
        goal=_to_world_point(result.goal),
        world_path=to_world_path(result.world_path),
        total_length_m=result.total_length,
    )


def _drop_route_referencing(edge_id: str) -> None:
    """Forget the highlighted route once one of its steps is deleted."""
    if STATE.last_route is not None and edge_id in STATE.last_route.path:
        STATE.last_route = None


def _load_startup_map(settings: Settings) -> None:
    if not settings.map_path or any(STATE.map_data.stats().values()):
        return
    try:
        STATE.map_data = load_map_file(settings.map_path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load map %s: %s", settings.map_path, exc)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings.from_env()
    STATE.settings = settings
    _load_startup_map(settings)

    app = FastAPI(title="Hospital Nav API", version=__version__)

    allow_credentials = settings.cors_origins != ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Health endpoint with loaded map counts."""
        return {
            "status": "ok",
            "version": app.version,
            "map": STATE.map_data.stats(),
            "max_iterations": STATE.settings.max_iterations,
            "strict_validation": STATE.settings.strict_validation,
        }

    @app.get("/map")
    async def get_map() -> dict[str, Any]:
        """Export current map data."""
        return export_map_payload(STATE.map_data)

    @app.put("/map")
    async def import_map(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Replace map data with an imported document."""
        try:
            map_data = parse_map_payload(payload)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Map import failed: {exc}") from exc

        STATE.map_data = map_data
        STATE.last_route = None
        report = validate_map(map_data, room_link_radius=STATE.settings.room_link_radius)
        logger.info("Imported map: %s", map_data.stats())
        return {
            "message": "Map imported successfully",
            "stats": map_data.stats(),
            "validation_summary": report["summary"],
            "ok": report["ok"],
        }

    @app.delete("/map")
    async def clear_map() -> dict[str, Any]:
        STATE.map_data.clear()
        STATE.last_route = None
        return {"message": "Map cleared", "stats": STATE.map_data.stats()}

    @app.get("/map/stats")
    async def get_map_stats() -> dict[str, Any]:
        return STATE.map_data.stats()

    @app.get("/map/validation")
    async def get_map_validation() -> dict[str, Any]:
        """Return the map quality report."""
        return validate_map(STATE.map_data, room_link_radius=STATE.settings.room_link_radius)

    @app.get("/locations")
    async def get_locations() -> dict[str, Any]:
        """Return selectable route endpoints."""
        return {"locations": list_locations(STATE.map_data)}

    @app.post("/corridors", status_code=201)
    async def add_corridor(payload: CorridorPayload) -> dict[str, Any]:
        corridor = Corridor(id=payload.id, start=payload.start, end=payload.end, width=payload.width)
        try:
            STATE.map_data.add_corridor(corridor)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return serialize_corridor(corridor)

    @app.delete("/corridors/{corridor_id}")
    async def remove_corridor(corridor_id: str) -> dict[str, Any]:
        if not STATE.map_data.remove_corridor(corridor_id):
            raise HTTPException(status_code=404, detail=f"Corridor '{corridor_id}' was not found")
        _drop_route_referencing(corridor_id)
        return {"removed": corridor_id}

    @app.post("/rooms", status_code=201)
    async def add_room(payload: RoomPayload) -> dict[str, Any]:
        if payload.building_id and STATE.map_data.get_building(payload.building_id) is None:
            raise HTTPException(status_code=404, detail=f"Building '{payload.building_id}' was not found")
        try:
            room = STATE.map_data.add_room(Room(**payload.model_dump()))
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return serialize_room(room)

    @app.delete("/rooms/{room_id}")
    async def remove_room(room_id: str) -> dict[str, Any]:
        if not STATE.map_data.remove_room(room_id):
            raise HTTPException(status_code=404, detail=f"Room '{room_id}' was not found")
        _drop_route_referencing(room_id)
        return {"removed": room_id}

    @app.post("/buildings", status_code=201)
    async def add_building(payload: BuildingPayload) -> dict[str, Any]:
        building = Building(**payload.model_dump())
        try:
            STATE.map_data.add_building(building)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return serialize_building(building)

    @app.delete("/buildings/{building_id}")
    async def remove_building(building_id: str) -> dict[str, Any]:
        if not STATE.map_data.remove_building(building_id):
            raise HTTPException(status_code=404, detail=f"Building '{building_id}' was not found")
        return {"removed": building_id}

    @app.post("/find-path", response_model=RouteResponse)
    async def find_path(payload: RouteRequest) -> RouteResponse:
        """Route between two selected locations and remember it for highlighting."""
        current: Position3 | None = None
        if payload.current_position is not None:
            current = payload.current_position.as_tuple()
        elif payload.current_geo is not None:
            x, z = latlng_to_world(payload.current_geo.lat, payload.current_geo.lng)
            current = (x, 0.0, z)

        try:
            result = plan_route(
                STATE.map_data,
                payload.from_id,
                payload.to_id,
                current_position=current,
                max_iterations=STATE.settings.max_iterations,
                room_link_radius=STATE.settings.room_link_radius,
                strict=STATE.settings.strict_validation,
            )
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid map data: {exc}") from exc
        except Exception as exc:  # pragma: no cover - safety net
            raise HTTPException(status_code=500, detail=f"Unexpected routing error: {exc}") from exc

        if result.status == "unknown_location":
            raise HTTPException(status_code=404, detail=result.directions[0])
        if result.status in ("no_data", "invalid_position"):
            raise HTTPException(status_code=400, detail=result.directions[0])
        if result.status in ("unreachable", "iteration_limit"):
            raise HTTPException(status_code=404, detail=NO_PATH_MESSAGE)

        if result.found:
            STATE.last_route = result
        return _route_response(result)

    @app.post("/find-corridor-path", response_model=CorridorPathResponse)
    async def find_corridor_path(payload: CorridorPathRequest) -> CorridorPathResponse:
        """Raw corridor search between two world points; empty path is a normal result."""
        try:
            result = find_path_result(
                STATE.map_data.corridors,
                STATE.map_data.rooms,
                payload.start.as_tuple(),
                payload.goal.as_tuple(),
                max_iterations=payload.max_iterations or STATE.settings.max_iterations,
                room_link_radius=STATE.settings.room_link_radius,
                strict=STATE.settings.strict_validation,
            )
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid map data: {exc}") from exc

        return CorridorPathResponse(status=result.status, path=result.edge_ids, iterations=result.iterations)

    @app.get("/route", response_model=RouteResponse)
    async def get_route() -> RouteResponse:
        """Return the latest highlighted route."""
        if STATE.last_route is None:
            raise HTTPException(status_code=404, detail="No active route")
        return _route_response(STATE.last_route)

    @app.post("/geo/to-world")
    async def geo_to_world(payload: GeoPoint) -> dict[str, float]:
        x, z = latlng_to_world(payload.lat, payload.lng)
        return {"x": x, "z": z}

    @app.post("/geo/to-latlng")
    async def geo_to_latlng(payload: PlanePoint) -> dict[str, float]:
        lat, lng = world_to_latlng(payload.x, payload.z)
        return {"lat": lat, "lng": lng}

    return app
