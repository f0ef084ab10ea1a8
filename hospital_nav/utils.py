"""Utility helpers shared across hospital_nav modules.

Purpose:
- Convert between GPS lat/lng and world-space `(x, z)` on the campus plane.
- Convert positions to JSON-safe payload types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from hospital_nav.models import Position3


@dataclass(slots=True, frozen=True)
class GeoReference:
    """Two surveyed points pinning the linear lat/lng <-> world mapping."""

    lat_a: float = -2.077904
    lng_a: float = 119.294723
    x_a: float = 0.0
    z_a: float = 0.0
    lat_b: float = -2.078807
    lng_b: float = 119.296418
    x_b: float = 20.0
    z_b: float = 30.0

    def scales(self) -> tuple[float, float]:
        if self.x_b == self.x_a or self.z_b == self.z_a:
            raise ValueError("Reference points must differ in both x and z")
        scale_x = (self.lng_b - self.lng_a) / (self.x_b - self.x_a)
        scale_z = (self.lat_b - self.lat_a) / (self.z_b - self.z_a)
        return scale_x, scale_z


CAMPUS_REFERENCE = GeoReference()


def latlng_to_world(lat: float, lng: float, ref: GeoReference = CAMPUS_REFERENCE) -> tuple[float, float]:
    """Map GPS `(lat, lng)` to world-space `(x, z)`."""
    scale_x, scale_z = ref.scales()
    offset_x = ref.lng_a - ref.x_a * scale_x
    offset_z = ref.lat_a - ref.z_a * scale_z
    return float((lng - offset_x) / scale_x), float((lat - offset_z) / scale_z)


def world_to_latlng(x: float, z: float, ref: GeoReference = CAMPUS_REFERENCE) -> tuple[float, float]:
    """Map world-space `(x, z)` to GPS `(lat, lng)`."""
    scale_x, scale_z = ref.scales()
    offset_x = ref.lng_a - ref.x_a * scale_x
    offset_z = ref.lat_a - ref.z_a * scale_z
    return float(z * scale_z + offset_z), float(x * scale_x + offset_x)


def to_position_list(pos: Position3) -> list[float]:
    """Convert a position tuple to a JSON list."""
    return [float(pos[0]), float(pos[1]), float(pos[2])]


def to_serializable_points(points: Iterable[Position3]) -> list[list[float]]:
    return [to_position_list(p) for p in points]
