"""Public interface for the openpyxl spreadsheet adapter."""

from __future__ import annotations

from .reader import OpenpyxlReader, read_sheet_payload
from .schema import SheetPayload, placeholder_header
from .writer import (
    DEFAULT_SHEET_TITLE,
    REPORT_MATCHED,
    REPORT_STATISTICS,
    REPORT_UNMATCHED,
    OpenpyxlWriter,
    SpreadsheetWriteError,
)

__all__ = [
    "DEFAULT_SHEET_TITLE",
    "REPORT_MATCHED",
    "REPORT_STATISTICS",
    "REPORT_UNMATCHED",
    "OpenpyxlReader",
    "OpenpyxlWriter",
    "SheetPayload",
    "SpreadsheetWriteError",
    "placeholder_header",
    "read_sheet_payload",
]
