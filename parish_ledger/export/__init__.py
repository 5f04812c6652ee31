"""Spreadsheet export package."""

from parish_ledger.export.rows import (
    EXPORT_COLUMNS,
    SHEET_NAME,
    ExportMode,
    available_weeks,
    day_of_week_label,
    export_file_name,
    export_rows,
    select_transactions,
)

__all__ = [
    "EXPORT_COLUMNS",
    "SHEET_NAME",
    "ExportMode",
    "available_weeks",
    "day_of_week_label",
    "export_file_name",
    "export_rows",
    "select_transactions",
]
