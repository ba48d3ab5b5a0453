"""Simulated road-distance matrix computation."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Sequence

from ...config import settings
from ...errors import InsufficientInputError
from ...models.domain import DistanceMatrix, Location
from ..geospatial import location_distance_km

logger = logging.getLogger(__name__)


class DistanceMatrixEngine:
    """Estimates travel distances by inflating great-circle distance with a road factor.

    No routing service is called. Each off-diagonal cell draws its own factor
    from ``uniform(road_factor_min, road_factor_max)``, so ``matrix[i][j]`` and
    ``matrix[j][i]`` generally differ. Pass a seeded ``random.Random`` to pin
    the values.
    """

    def __init__(
        self,
        road_factor_min: float | None = None,
        road_factor_max: float | None = None,
        latency_seconds: float | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.road_factor_min = road_factor_min if road_factor_min is not None else settings.road_factor_min
        self.road_factor_max = road_factor_max if road_factor_max is not None else settings.road_factor_max
        if self.road_factor_max < self.road_factor_min:
            raise ValueError("road_factor_max must be greater than or equal to road_factor_min.")
        self.latency_seconds = latency_seconds if latency_seconds is not None else settings.simulated_latency_seconds
        self.rng = rng or random.Random()

    def road_factor(self) -> float:
        return self.rng.uniform(self.road_factor_min, self.road_factor_max)

    def build_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        """Compute the full matrix synchronously."""
        if len(locations) < 2:
            raise InsufficientInputError("Need at least 2 locations to calculate distances.")

        n = len(locations)
        matrix: DistanceMatrix = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                base_distance = location_distance_km(locations[i], locations[j])
                matrix[i][j] = base_distance * self.road_factor()
        return matrix

    async def compute_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        """Resolve the matrix after the simulated routing-service delay.

        The matrix is only returned once fully populated; nothing is emitted
        before the delay completes.
        """
        if len(locations) < 2:
            raise InsufficientInputError("Need at least 2 locations to calculate distances.")

        snapshot = tuple(locations)
        start_time = time.time()
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
        matrix = self.build_matrix(snapshot)
        elapsed = time.time() - start_time
        logger.info(f"Computed {len(snapshot)}x{len(snapshot)} distance matrix in {elapsed:.2f}s")
        return matrix
