"""Distance matrix and statistics API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from .locations import LocationModel


class MatrixResponse(BaseModel):
    locations: List[LocationModel]
    distanceMatrix: List[List[float]]


class DistancePairModel(BaseModel):
    from_index: int
    to_index: int
    from_name: str
    to_name: str
    distance_km: float


class HistogramBucketModel(BaseModel):
    label: str
    lower: float
    upper: Optional[float] = None
    count: int


class StatisticsResponse(BaseModel):
    hasData: bool
    count: int = 0
    minimum: Optional[DistancePairModel] = None
    maximum: Optional[DistancePairModel] = None
    mean: Optional[float] = None
    total: Optional[float] = None
    histogram: List[HistogramBucketModel] = []
