"""Runtime settings read from `HOSPITAL_NAV_*` environment variables."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field

from hospital_nav.corridor_graph import ROOM_LINK_RADIUS
from hospital_nav.pathfinding import DEFAULT_MAX_ITERATIONS

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Routing and service parameters."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    room_link_radius: float = ROOM_LINK_RADIUS
    strict_validation: bool = True
    map_path: str = ""
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be > 0")
        if self.room_link_radius <= 0:
            raise ValueError("room_link_radius must be > 0")

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("HOSPITAL_NAV_CORS_ORIGINS", "*").strip() or "*"
        origins = ["*"] if raw_origins == "*" else [o.strip() for o in raw_origins.split(",") if o.strip()]
        return cls(
            max_iterations=_env_int("HOSPITAL_NAV_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS),
            room_link_radius=_env_float("HOSPITAL_NAV_ROOM_LINK_RADIUS", ROOM_LINK_RADIUS),
            strict_validation=_env_bool("HOSPITAL_NAV_STRICT_VALIDATION", True),
            map_path=os.getenv("HOSPITAL_NAV_MAP_PATH", "").strip(),
            cors_origins=origins,
            log_level=os.getenv("HOSPITAL_NAV_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once; later calls only adjust the level."""
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(numeric)
