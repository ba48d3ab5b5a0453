"""Import parsers turning CSV, JSON and workbook files into locations.

Row-level problems never abort an import: the row is skipped, counted and
described in ``ImportResult.errors``. Only an import with zero valid rows
fails, with a ``ParseError`` carrying the skipped count.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from openpyxl import load_workbook

from ...config import settings
from ...errors import ParseError, ValidationError
from ...models.domain import Location
from .validation import coerce_float, parse_coordinate_pair, validate_location

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".csv", ".json", ".xlsx"}


@dataclass(slots=True)
class RowError:
    row: int
    message: str


@dataclass(slots=True)
class ImportResult:
    locations: List[Location] = field(default_factory=list)
    skipped: int = 0
    errors: List[RowError] = field(default_factory=list)

    def skip(self, row: int, message: str) -> None:
        self.skipped += 1
        self.errors.append(RowError(row=row, message=message))
        logger.warning(f"Skipped import row {row}: {message}")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _row_to_location(cells: Sequence[Any]) -> Location:
    """Build a location from ``name, "lat, lng"`` or ``name, lat, lng[, address]``."""
    values = list(cells)
    name = values[0] if values else None
    second = values[1] if len(values) > 1 else None
    third = values[2] if len(values) > 2 else None

    if _is_blank(third):
        lat, lng = parse_coordinate_pair(second)
        return validate_location(name, lat, lng)

    address = values[3] if len(values) > 3 and not _is_blank(values[3]) else None
    return validate_location(name, second, third, address)


def _looks_like_header(cells: Sequence[Any]) -> bool:
    """A first row is a header only when none of its coordinate cells is numeric."""
    try:
        _row_to_location(cells)
        return False
    except ValidationError:
        pass

    candidates = [candidate for candidate in cells[1:3] if not _is_blank(candidate)]
    if not candidates:
        return False
    for candidate in candidates:
        try:
            coerce_float(candidate, "value")
            return False
        except ValidationError:
            continue
    return True


def _collect_rows(rows: Iterable[tuple[int, Sequence[Any]]], *, source: str) -> ImportResult:
    result = ImportResult()
    limit = settings.max_import_rows
    processed = 0
    for row_number, cells in rows:
        if all(_is_blank(cell) for cell in cells):
            continue
        if processed >= limit:
            logger.warning(f"Import from {source} truncated at {limit} rows")
            break
        processed += 1
        try:
            result.locations.append(_row_to_location(cells))
        except ValidationError as exc:
            result.skip(row_number, str(exc))
    return _finalize(result, source=source)


def _finalize(result: ImportResult, *, source: str) -> ImportResult:
    if not result.locations:
        raise ParseError(f"No valid locations found in {source}.", skipped=result.skipped)
    logger.info(f"Imported {len(result.locations)} locations from {source} ({result.skipped} skipped)")
    return result


def parse_csv(text: str) -> ImportResult:
    """Parse ``name, lat, lng[, address]`` rows. A header row is detected and skipped."""
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    rows = [(index, row) for index, row in enumerate(reader, start=1)]
    if rows and _looks_like_header(rows[0][1]):
        rows = rows[1:]
    return _collect_rows(rows, source="CSV file")


def parse_json(text: str) -> ImportResult:
    """Parse ``{"locations": [...]}``, a saved project, or an export document."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc

    if isinstance(payload, dict) and isinstance(payload.get("project"), dict):
        payload = payload["project"]
    entries = payload.get("locations") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise ParseError("JSON file must contain a 'locations' list.")

    limit = settings.max_import_rows
    if len(entries) > limit:
        logger.warning(f"Import from JSON file truncated at {limit} rows")
        entries = entries[:limit]

    result = ImportResult()
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            result.skip(index, "Location entry must be an object.")
            continue
        try:
            result.locations.append(
                validate_location(entry.get("name"), entry.get("lat"), entry.get("lng"), entry.get("address"))
            )
        except ValidationError as exc:
            result.skip(index, str(exc))
    return _finalize(result, source="JSON file")


def parse_workbook(data: bytes) -> ImportResult:
    """Parse the first sheet of a workbook. The first row is a header."""
    try:
        workbook = load_workbook(filename=BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        raise ParseError(f"Unable to read workbook: {exc}") from exc

    try:
        worksheet = workbook.worksheets[0]
        rows = [
            (index, row)
            for index, row in enumerate(worksheet.iter_rows(min_row=2, values_only=True), start=2)
        ]
    finally:
        workbook.close()
    return _collect_rows(rows, source="workbook")


def parse_upload(filename: str, data: bytes) -> ImportResult:
    suffix = Path(filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ParseError(f"Unsupported file type '{suffix}'. Use .csv, .json or .xlsx.")
    if suffix == ".xlsx":
        return parse_workbook(data)

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError("File must be UTF-8 encoded.") from exc
    if suffix == ".csv":
        return parse_csv(text)
    return parse_json(text)
