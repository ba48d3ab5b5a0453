import random

import pytest

from route_buddy.models.domain import Location
from route_buddy.services.matrix import DistanceMatrixEngine, LocationStore


def make_location(name: str, lat: float, lng: float, address: str | None = None) -> Location:
    return Location(name=name, lat=lat, lng=lng, address=address)


@pytest.fixture
def paris_triangle() -> list[Location]:
    return [
        make_location("Paris", 48.8566, 2.3522, "Place de l'Hotel de Ville"),
        make_location("Versailles", 48.8049, 2.1204),
        make_location("Orly", 48.7262, 2.3652),
    ]


@pytest.fixture
def engine() -> DistanceMatrixEngine:
    return DistanceMatrixEngine(latency_seconds=0, rng=random.Random(1234))


@pytest.fixture
def store(engine: DistanceMatrixEngine) -> LocationStore:
    return LocationStore(engine)
