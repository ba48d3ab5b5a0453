"""Domain models for locations and distance statistics."""

from dataclasses import dataclass, field
from typing import List, Optional

DistanceMatrix = List[List[float]]


@dataclass(frozen=True, slots=True)
class Location:
    """A named geographic point. Identity is its position in the store."""

    name: str
    lat: float
    lng: float
    address: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {"name": self.name, "lat": self.lat, "lng": self.lng}
        if self.address is not None:
            payload["address"] = self.address
        return payload


@dataclass(slots=True)
class DistancePair:
    from_index: int
    to_index: int
    from_name: str
    to_name: str
    distance_km: float


@dataclass(slots=True)
class HistogramBucket:
    label: str
    lower: float
    upper: Optional[float]
    count: int = 0


@dataclass(slots=True)
class DistanceStatistics:
    count: int
    minimum: DistancePair
    maximum: DistancePair
    mean: float
    total: float
    histogram: List[HistogramBucket] = field(default_factory=list)
