"""Distance matrix endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import InsufficientInputError, NoDataError, StaleResultError
from ...schemas.locations import LocationModel
from ...schemas.matrix import MatrixResponse, StatisticsResponse
from ...services.matrix import LocationStore
from ...services.statistics import compute_statistics, statistics_to_dict
from ..dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matrix", tags=["matrix"])


def _matrix_response(store: LocationStore) -> MatrixResponse:
    locations, matrix = store.require_matrix()
    return MatrixResponse(
        locations=[LocationModel(**location.to_dict()) for location in locations],
        distanceMatrix=matrix,
    )


@router.post("", response_model=MatrixResponse, status_code=status.HTTP_200_OK)
async def compute_matrix(store: LocationStore = Depends(get_store)) -> MatrixResponse:
    try:
        await store.compute_distances()
        return _matrix_response(store)
    except InsufficientInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (StaleResultError, NoDataError) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error calculating distances: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate distances: {str(exc)}",
        ) from exc


@router.get("", response_model=MatrixResponse, status_code=status.HTTP_200_OK)
def get_matrix(store: LocationStore = Depends(get_store)) -> MatrixResponse:
    try:
        return _matrix_response(store)
    except NoDataError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/statistics", response_model=StatisticsResponse, status_code=status.HTTP_200_OK)
def get_statistics(store: LocationStore = Depends(get_store)) -> StatisticsResponse:
    try:
        locations, matrix = store.require_matrix()
        stats = compute_statistics(locations, matrix)
    except NoDataError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return StatisticsResponse.model_validate(statistics_to_dict(stats))
