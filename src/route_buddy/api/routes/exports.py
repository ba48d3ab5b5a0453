"""Export download endpoints."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from ...errors import NoDataError
from ...persistence.filesystem import FileStorage
from ...services.matrix import LocationStore
from ...services.outputs import (
    export_filename,
    matrix_to_csv,
    matrix_to_json,
    matrix_to_workbook,
    render_json,
    saved_project,
)
from ..dependencies import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exports", tags=["exports"])

_MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
    "project": "application/json",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _build_payload(kind: str, store: LocationStore) -> str | bytes | dict:
    locations, matrix = store.locations, store.matrix
    if kind == "csv":
        return matrix_to_csv(locations, matrix)
    if kind == "json":
        return matrix_to_json(locations, matrix)
    if kind == "xlsx":
        return matrix_to_workbook(locations, matrix)
    return saved_project(locations, matrix)


def _download(kind: str, store: LocationStore, persist: bool) -> Response:
    try:
        payload = _build_payload(kind, store)
    except NoDataError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    filename = export_filename(kind)
    if persist:
        try:
            FileStorage().save_export(filename, payload, prefix=kind)
        except OSError as exc:
            logger.exception(f"Failed to persist export {filename}: {exc}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to save export: {str(exc)}",
            ) from exc

    content = render_json(payload) if isinstance(payload, dict) else payload
    return Response(
        content=content,
        media_type=_MEDIA_TYPES[kind],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{kind}", status_code=status.HTTP_200_OK)
def download_export(
    kind: Literal["csv", "json", "xlsx", "project"],
    persist: bool = Query(default=False, description="Also write the export under the data root"),
    store: LocationStore = Depends(get_store),
) -> Response:
    """Download the current matrix as CSV, JSON or workbook, or the saved project file."""
    return _download(kind, store, persist)
