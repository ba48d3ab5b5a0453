"""Distance matrix engine and session store."""

from .engine import DistanceMatrixEngine
from .store import LocationStore

__all__ = ["DistanceMatrixEngine", "LocationStore"]
