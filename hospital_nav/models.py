"""Core map entities shared by graph building, routing and the HTTP layer.

Coordinates are world-space `(x, y, z)` triples. Routing only looks at the
`x`/`z` plane; `y` is carried for rendering clients.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

Position3 = tuple[float, float, float]
EdgeKind = Literal["corridor", "room"]
LocationKind = Literal["building", "room", "corridor"]


class ConfigurationError(ValueError):
    """Map data cannot be turned into a trustworthy routing graph."""


@dataclass(slots=True, frozen=True)
class Corridor:
    """Straight, undirected walkable segment between two anchor points."""

    id: str
    start: Position3
    end: Position3
    width: float = 1.0


@dataclass(slots=True, frozen=True)
class Room:
    """Point-of-interest node that joins the corridor graph by proximity."""

    id: str
    name: str
    position: Position3
    size: Position3 = (1.5, 0.2, 1.5)
    building_id: str = ""
    image: str | None = None


@dataclass(slots=True, frozen=True)
class Building:
    """Selectable campus building. Not a graph node."""

    id: str
    name: str
    position: Position3
    size: Position3 = (4.0, 3.0, 4.0)
    has_rooms: bool = False
    color: str | None = None


def as_position(value: object, label: str = "position") -> Position3:
    """Coerce a `[x, y, z]` sequence into a float triple."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{label} must be [x,y,z]")
    try:
        return float(value[0]), float(value[1]), float(value[2])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} must contain numbers") from exc


def is_finite_position(pos: Position3) -> bool:
    return all(math.isfinite(float(v)) for v in pos)


def planar(pos: Position3) -> Position3:
    """Drop height so positions compare on the routing plane."""
    return float(pos[0]), 0.0, float(pos[2])
