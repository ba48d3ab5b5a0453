"""Distance matrix analytics helpers."""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterator, Optional, Sequence

from ..errors import NoDataError
from ..models.domain import (
    DistanceMatrix,
    DistancePair,
    DistanceStatistics,
    HistogramBucket,
    Location,
)

# (label, lower exclusive, upper inclusive); the first bucket also takes 0.
HISTOGRAM_BUCKETS: tuple[tuple[str, float, Optional[float]], ...] = (
    ("0-10 km", 0.0, 10.0),
    ("10-50 km", 10.0, 50.0),
    ("50-100 km", 50.0, 100.0),
    ("100+ km", 100.0, None),
)


def iter_off_diagonal(matrix: DistanceMatrix) -> Iterator[tuple[int, int, float]]:
    """Yield ``(i, j, value)`` for every cell with ``i != j`` in row-major order."""

    for i, row in enumerate(matrix):
        for j, value in enumerate(row):
            if i != j:
                yield i, j, value


def off_diagonal_mean(matrix: DistanceMatrix) -> Optional[float]:
    values = [value for _, _, value in iter_off_diagonal(matrix)]
    if not values:
        return None
    return sum(values) / len(values)


def _check_shape(locations: Sequence[Location], matrix: Optional[DistanceMatrix]) -> DistanceMatrix:
    if matrix is None or len(matrix) == 0:
        raise NoDataError("No distance matrix available. Calculate distances first.")
    size = len(matrix)
    if any(len(row) != size for row in matrix):
        raise ValueError("Distance matrix must be square.")
    if size != len(locations):
        raise ValueError(
            f"Distance matrix size ({size}) does not match location count ({len(locations)})."
        )
    return matrix


def _bucket_index(distance: float) -> int:
    for index, (_, _, upper) in enumerate(HISTOGRAM_BUCKETS):
        if upper is None or distance <= upper:
            return index
    return len(HISTOGRAM_BUCKETS) - 1


def compute_statistics(
    locations: Sequence[Location], matrix: Optional[DistanceMatrix]
) -> Optional[DistanceStatistics]:
    """Summarise the off-diagonal cells of ``matrix``.

    Returns ``None`` when there are no off-diagonal cells. When several pairs
    share the minimum or maximum, the last one in row-major order is reported.
    """

    matrix = _check_shape(locations, matrix)
    cells = list(iter_off_diagonal(matrix))
    if not cells:
        return None

    values = [value for _, _, value in cells]
    minimum = min(values)
    maximum = max(values)
    total = sum(values)

    min_pair: Optional[DistancePair] = None
    max_pair: Optional[DistancePair] = None
    histogram = [HistogramBucket(label=label, lower=lower, upper=upper) for label, lower, upper in HISTOGRAM_BUCKETS]

    for i, j, value in cells:
        if value == minimum:
            min_pair = DistancePair(i, j, locations[i].name, locations[j].name, value)
        if value == maximum:
            max_pair = DistancePair(i, j, locations[i].name, locations[j].name, value)
        histogram[_bucket_index(value)].count += 1

    return DistanceStatistics(
        count=len(values),
        minimum=min_pair,
        maximum=max_pair,
        mean=total / len(values),
        total=total,
        histogram=histogram,
    )


def statistics_to_dict(stats: Optional[DistanceStatistics]) -> dict:
    if stats is None:
        return {"hasData": False}
    return {
        "hasData": True,
        "count": stats.count,
        "minimum": asdict(stats.minimum),
        "maximum": asdict(stats.maximum),
        "mean": stats.mean,
        "total": stats.total,
        "histogram": [asdict(bucket) for bucket in stats.histogram],
    }
