"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from ..models.domain import Location

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push a slightly outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def location_distance_km(origin: Location, destination: Location) -> float:
    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)


def path_distance_km(locations: Sequence[Location]) -> tuple[list[float], float]:
    """Return per-leg and total great-circle distance visiting locations in order.

    The first leg is always 0 since the first location is the departure point.
    """

    legs: list[float] = []
    for index, location in enumerate(locations):
        if index == 0:
            legs.append(0.0)
            continue
        legs.append(location_distance_km(locations[index - 1], location))
    return legs, sum(legs)
