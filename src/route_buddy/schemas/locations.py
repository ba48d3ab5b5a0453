"""Location API schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class LocationModel(BaseModel):
    name: str
    lat: float
    lng: float
    address: Optional[str] = None


class LocationCreateRequest(BaseModel):
    """Manual entry. Coordinates may be strings so a decimal comma is accepted."""

    name: str
    lat: Union[float, str]
    lng: Union[float, str]
    address: Optional[str] = None


class LocationListResponse(BaseModel):
    locations: List[LocationModel]
    count: int
    hasMatrix: bool
    isCalculating: bool


class RowErrorModel(BaseModel):
    row: int
    message: str


class ImportResponse(BaseModel):
    fileName: str
    imported: int
    skipped: int
    errors: List[RowErrorModel] = Field(default_factory=list)
    totalLocations: int


class PathDistanceResponse(BaseModel):
    legs: List[float]
    totalKm: float
