"""Export serializers."""

from .matrix_formatter import (
    export_filename,
    matrix_to_csv,
    matrix_to_json,
    matrix_to_workbook,
    render_json,
    saved_project,
)

__all__ = [
    "export_filename",
    "matrix_to_csv",
    "matrix_to_json",
    "matrix_to_workbook",
    "render_json",
    "saved_project",
]
