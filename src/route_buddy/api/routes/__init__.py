"""Route group exports."""

from . import exports, health, locations, matrix

__all__ = ["exports", "health", "locations", "matrix"]
