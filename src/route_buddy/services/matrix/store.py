"""Session state holder for the location list and its cached matrix."""

from __future__ import annotations

import logging
from typing import Optional

from ...errors import InsufficientInputError, NoDataError, StaleResultError
from ...models.domain import DistanceMatrix, Location
from .engine import DistanceMatrixEngine

logger = logging.getLogger(__name__)


class LocationStore:
    """Owns the ordered locations and the matrix derived from them.

    Every mutation bumps ``generation`` and drops the cached matrix. A
    computation captures the generation when it starts and its result is
    discarded if the list changed before it resolved.
    """

    def __init__(self, engine: DistanceMatrixEngine | None = None) -> None:
        self.engine = engine or DistanceMatrixEngine()
        self._locations: list[Location] = []
        self._matrix: Optional[DistanceMatrix] = None
        self._generation = 0
        self._in_flight = 0

    @property
    def locations(self) -> tuple[Location, ...]:
        return tuple(self._locations)

    @property
    def matrix(self) -> Optional[DistanceMatrix]:
        if self._matrix is None:
            return None
        return [list(row) for row in self._matrix]

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_calculating(self) -> bool:
        return self._in_flight > 0

    def __len__(self) -> int:
        return len(self._locations)

    def _invalidate(self) -> None:
        self._generation += 1
        self._matrix = None

    def add_location(self, location: Location) -> int:
        """Append a location and return its index."""
        self._locations.append(location)
        self._invalidate()
        return len(self._locations) - 1

    def add_locations(self, locations: list[Location]) -> None:
        if not locations:
            return
        self._locations.extend(locations)
        self._invalidate()

    def remove_location(self, index: int) -> Location:
        """Remove the location at ``index``.

        Raises ``IndexError`` for an out-of-bounds index and leaves the state
        untouched in that case. Negative indexes are rejected.
        """
        if index < 0 or index >= len(self._locations):
            raise IndexError(f"Location index {index} is out of range (size {len(self._locations)}).")
        removed = self._locations.pop(index)
        self._invalidate()
        return removed

    def clear(self) -> None:
        self._locations = []
        self._invalidate()

    def require_matrix(self) -> tuple[tuple[Location, ...], DistanceMatrix]:
        """Return the (locations, matrix) pair or raise ``NoDataError``."""
        matrix = self.matrix
        if matrix is None:
            raise NoDataError("No distance matrix available. Calculate distances first.")
        return self.locations, matrix

    async def compute_distances(self) -> DistanceMatrix:
        if len(self._locations) < 2:
            raise InsufficientInputError("Need at least 2 locations to calculate distances.")

        generation = self._generation
        snapshot = tuple(self._locations)
        self._in_flight += 1
        try:
            matrix = await self.engine.compute_matrix(snapshot)
        except Exception as exc:
            logger.error(f"Error calculating distances: {exc}")
            raise
        finally:
            self._in_flight -= 1

        if generation != self._generation:
            logger.warning(
                f"Discarding stale distance matrix (started at generation {generation}, "
                f"store is now at {self._generation})"
            )
            raise StaleResultError("Locations changed while distances were being calculated.")

        self._matrix = matrix
        return self.matrix
