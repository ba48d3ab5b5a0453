import pytest

from route_buddy.errors import NoDataError
from route_buddy.models.domain import Location
from route_buddy.services.statistics import (
    compute_statistics,
    off_diagonal_mean,
    statistics_to_dict,
)


def _locations(count: int) -> list[Location]:
    return [Location(f"L{index}", 0.0, float(index)) for index in range(count)]


def _constant_matrix(size: int, value: float) -> list[list[float]]:
    return [[0.0 if i == j else value for j in range(size)] for i in range(size)]


def test_constant_matrix_statistics():
    size, k = 4, 42.5
    stats = compute_statistics(_locations(size), _constant_matrix(size, k))

    assert stats.minimum.distance_km == k
    assert stats.maximum.distance_km == k
    assert stats.mean == pytest.approx(k)
    assert stats.total == pytest.approx(k * size * (size - 1))
    assert stats.count == size * (size - 1)


def test_ties_report_last_pair_in_row_major_order():
    stats = compute_statistics(_locations(3), _constant_matrix(3, 5.0))

    assert (stats.minimum.from_index, stats.minimum.to_index) == (2, 1)
    assert (stats.maximum.from_index, stats.maximum.to_index) == (2, 1)
    assert stats.minimum.from_name == "L2"
    assert stats.minimum.to_name == "L1"


def test_extrema_pairs_and_names():
    matrix = [
        [0.0, 12.0, 150.0],
        [11.0, 0.0, 60.0],
        [149.0, 61.0, 0.0],
    ]
    stats = compute_statistics(_locations(3), matrix)

    assert (stats.minimum.from_index, stats.minimum.to_index) == (1, 0)
    assert stats.minimum.distance_km == 11.0
    assert (stats.maximum.from_index, stats.maximum.to_index) == (0, 2)
    assert stats.maximum.distance_km == 150.0
    assert stats.total == pytest.approx(443.0)
    assert stats.mean == pytest.approx(443.0 / 6)


def test_histogram_bucket_boundaries():
    matrix = [
        [0.0, 10.0, 10.01, 50.0],
        [50.5, 0.0, 100.0, 100.01],
        [0.0, 3.0, 0.0, 75.0],
        [250.0, 49.99, 9.0, 0.0],
    ]
    stats = compute_statistics(_locations(4), matrix)

    counts = {bucket.label: bucket.count for bucket in stats.histogram}
    assert counts == {
        "0-10 km": 4,
        "10-50 km": 3,
        "50-100 km": 3,
        "100+ km": 2,
    }
    assert sum(counts.values()) == stats.count == 12


def test_zero_off_diagonal_distance_is_counted():
    matrix = [[0.0, 0.0], [0.0, 0.0]]
    stats = compute_statistics(_locations(2), matrix)

    assert stats.count == 2
    assert stats.minimum.distance_km == 0.0
    assert stats.histogram[0].count == 2


def test_single_location_reports_no_data():
    stats = compute_statistics(_locations(1), [[0.0]])

    assert stats is None
    assert statistics_to_dict(stats) == {"hasData": False}


def test_missing_matrix_raises_no_data():
    with pytest.raises(NoDataError):
        compute_statistics(_locations(2), None)
    with pytest.raises(NoDataError):
        compute_statistics([], [])


def test_shape_mismatch_is_rejected():
    with pytest.raises(ValueError):
        compute_statistics(_locations(3), _constant_matrix(2, 1.0))
    with pytest.raises(ValueError):
        compute_statistics(_locations(2), [[0.0, 1.0], [1.0]])


def test_off_diagonal_mean_ignores_diagonal():
    assert off_diagonal_mean(_constant_matrix(3, 7.0)) == pytest.approx(7.0)
    assert off_diagonal_mean([[0.0]]) is None


def test_statistics_to_dict_shape():
    payload = statistics_to_dict(compute_statistics(_locations(2), _constant_matrix(2, 20.0)))

    assert payload["hasData"] is True
    assert payload["minimum"]["from_name"] == "L1"
    assert [bucket["count"] for bucket in payload["histogram"]] == [0, 2, 0, 0]
