"""Location list endpoints."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ...errors import ParseError, ValidationError
from ...schemas.locations import (
    ImportResponse,
    LocationCreateRequest,
    LocationListResponse,
    LocationModel,
    PathDistanceResponse,
    RowErrorModel,
)
from ...services.geospatial import path_distance_km
from ...services.imports import SUPPORTED_SUFFIXES, parse_upload, validate_location
from ...services.matrix import LocationStore
from ..dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])


def _list_response(store: LocationStore) -> LocationListResponse:
    locations = [LocationModel(**location.to_dict()) for location in store.locations]
    return LocationListResponse(
        locations=locations,
        count=len(locations),
        hasMatrix=store.matrix is not None,
        isCalculating=store.is_calculating,
    )


@router.get("", response_model=LocationListResponse, status_code=status.HTTP_200_OK)
def list_locations(store: LocationStore = Depends(get_store)) -> LocationListResponse:
    return _list_response(store)


@router.post("", response_model=LocationListResponse, status_code=status.HTTP_201_CREATED)
def add_location(payload: LocationCreateRequest, store: LocationStore = Depends(get_store)) -> LocationListResponse:
    try:
        location = validate_location(payload.name, payload.lat, payload.lng, payload.address)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    store.add_location(location)
    logger.info(f"Added location '{location.name}' ({location.lat}, {location.lng})")
    return _list_response(store)


@router.delete("/{index}", response_model=LocationListResponse, status_code=status.HTTP_200_OK)
def remove_location(index: int, store: LocationStore = Depends(get_store)) -> LocationListResponse:
    try:
        store.remove_location(index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _list_response(store)


@router.delete("", response_model=LocationListResponse, status_code=status.HTTP_200_OK)
def clear_locations(store: LocationStore = Depends(get_store)) -> LocationListResponse:
    store.clear()
    return _list_response(store)


@router.post("/import", response_model=ImportResponse, status_code=status.HTTP_201_CREATED)
async def import_locations(
    file: UploadFile = File(...),
    store: LocationStore = Depends(get_store),
) -> ImportResponse:
    """Append locations from a .csv, .json or .xlsx file. Invalid rows are skipped."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only .csv, .json and .xlsx files are supported.",
        )

    try:
        result = parse_upload(file.filename, await file.read())
    except ParseError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "skipped": exc.skipped},
        ) from exc

    store.add_locations(result.locations)
    return ImportResponse(
        fileName=file.filename,
        imported=len(result.locations),
        skipped=result.skipped,
        errors=[RowErrorModel(row=error.row, message=error.message) for error in result.errors],
        totalLocations=len(store),
    )


@router.get("/path", response_model=PathDistanceResponse, status_code=status.HTTP_200_OK)
def get_path_distance(store: LocationStore = Depends(get_store)) -> PathDistanceResponse:
    """Great-circle distance visiting the locations in list order."""
    legs, total = path_distance_km(store.locations)
    return PathDistanceResponse(legs=legs, totalKm=total)
