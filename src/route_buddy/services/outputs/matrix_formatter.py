"""Serializers for distance matrix exports (CSV, JSON, workbook)."""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from openpyxl import Workbook

from ...config import settings
from ...errors import NoDataError
from ...models.domain import DistanceMatrix, Location
from ..statistics import off_diagonal_mean

MATRIX_SHEET_TITLE = "Distance Matrix"
LOCATIONS_SHEET_TITLE = "Locations"
LOCATION_COLUMNS = ["Name", "Latitude", "Longitude", "Address"]

_EXPORT_FILENAMES = {
    "csv": "distance_matrix_{day}.csv",
    "json": "route_buddy_project_{day}.json",
    "xlsx": "route_buddy_{day}.xlsx",
    "project": "route_buddy_project_{day}.json",
}


def _require_matrix(matrix: Optional[DistanceMatrix]) -> DistanceMatrix:
    if matrix is None:
        raise NoDataError("No data to export. Calculate distances first.")
    return matrix


def _format_distance(value: float) -> str:
    return f"{value:.2f}"


def _matrix_grid(locations: Sequence[Location], matrix: DistanceMatrix) -> list[list[str]]:
    header = [""] + [location.name for location in locations]
    rows = [
        [location.name] + [_format_distance(value) for value in matrix[index]]
        for index, location in enumerate(locations)
    ]
    return [header, *rows]


def export_filename(kind: str, day: date | None = None) -> str:
    """Return the download file name for an export kind (csv, json, xlsx, project)."""
    template = _EXPORT_FILENAMES.get(kind)
    if template is None:
        raise ValueError(f"Unknown export kind '{kind}'.")
    day = day or datetime.now(timezone.utc).date()
    return template.format(day=day.isoformat())


def matrix_to_csv(locations: Sequence[Location], matrix: Optional[DistanceMatrix]) -> str:
    matrix = _require_matrix(matrix)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(_matrix_grid(locations, matrix))
    return buffer.getvalue().removesuffix("\n")


def matrix_to_json(
    locations: Sequence[Location],
    matrix: Optional[DistanceMatrix],
    *,
    created_at: datetime | None = None,
    project_name: str | None = None,
) -> dict:
    matrix = _require_matrix(matrix)
    created_at = created_at or datetime.now(timezone.utc)
    count = len(locations)
    return {
        "project": {
            "name": project_name or settings.project_name,
            "created": created_at.isoformat(),
            "locations": [location.to_dict() for location in locations],
            "distanceMatrix": [list(row) for row in matrix],
        },
        "statistics": {
            "totalLocations": count,
            "totalRoutes": count * (count - 1),
            "averageDistance": off_diagonal_mean(matrix),
        },
    }


def render_json(data: dict, *, indent: int = 2) -> str:
    return json.dumps(data, ensure_ascii=False, indent=indent)


def matrix_to_workbook(locations: Sequence[Location], matrix: Optional[DistanceMatrix]) -> bytes:
    """Build a two-sheet workbook: the CSV grid, then the location listing."""
    matrix = _require_matrix(matrix)

    workbook = Workbook()
    matrix_sheet = workbook.active
    matrix_sheet.title = MATRIX_SHEET_TITLE
    for row in _matrix_grid(locations, matrix):
        matrix_sheet.append(row)

    locations_sheet = workbook.create_sheet(LOCATIONS_SHEET_TITLE)
    locations_sheet.append(LOCATION_COLUMNS)
    for location in locations:
        locations_sheet.append([location.name, location.lat, location.lng, location.address or ""])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def saved_project(
    locations: Sequence[Location],
    matrix: Optional[DistanceMatrix],
    *,
    saved_at: datetime | None = None,
    name: str | None = None,
) -> dict:
    """Project file meant for later re-import. The matrix may be absent."""
    if not locations:
        raise NoDataError("No locations to save.")
    saved_at = saved_at or datetime.now(timezone.utc)
    return {
        "name": name or f"{settings.project_name} {saved_at.date().isoformat()}",
        "locations": [location.to_dict() for location in locations],
        "distanceMatrix": [list(row) for row in matrix] if matrix is not None else None,
        "saved": saved_at.isoformat(),
    }
