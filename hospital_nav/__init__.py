"""Corridor/room routing backend for the hospital campus map."""

__version__ = "0.3.0"
