"""Location import helpers."""

from .parsers import (
    SUPPORTED_SUFFIXES,
    ImportResult,
    RowError,
    parse_csv,
    parse_json,
    parse_upload,
    parse_workbook,
)
from .validation import coerce_float, parse_coordinate_pair, validate_location

__all__ = [
    "SUPPORTED_SUFFIXES",
    "ImportResult",
    "RowError",
    "parse_csv",
    "parse_json",
    "parse_upload",
    "parse_workbook",
    "coerce_float",
    "parse_coordinate_pair",
    "validate_location",
]
