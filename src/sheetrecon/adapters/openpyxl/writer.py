"""Write tables and merge reports as ``.xlsx`` workbooks.

Every save goes to a temporary file next to the destination first and is then
moved over it with ``os.replace``, so a failed save never leaves a half-written
destination behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import date, time
from pathlib import Path
from typing import TYPE_CHECKING

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from sheetrecon.domain.reconciliation import UnmatchedReason
from sheetrecon.domain.temporal import column_roles

from .reader import WORKBOOK_READ_ERRORS
from .schema import placeholder_header

if TYPE_CHECKING:
    from openpyxl.cell.cell import Cell
    from openpyxl.worksheet.worksheet import Worksheet

    from sheetrecon.domain.reconciliation import MatchResult
    from sheetrecon.domain.types import CellValue, Table

log = logging.getLogger(__name__)

DEFAULT_SHEET_TITLE = "Consolidado"
REPORT_STATISTICS = "Statistics"
REPORT_MATCHED = "Matched"
REPORT_UNMATCHED = "Unmatched"

_HEADER_FONT = Font(bold=True)


class SpreadsheetWriteError(OSError):
    """Raised when a workbook could not be written to its destination."""


def _save_atomic(workbook: Workbook, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(suffix=".xlsx", prefix=f".{path.stem}-", dir=path.parent)
    os.close(handle)
    temp_path = Path(temp_name)
    try:
        workbook.save(temp_path)
        os.replace(temp_path, path)
    except OSError as exc:
        raise SpreadsheetWriteError(f"Could not write {path}: {exc}") from exc
    finally:
        temp_path.unlink(missing_ok=True)


def _header_value(header: str, column_number: int) -> str | None:
    if not header or header == placeholder_header(column_number):
        return None
    return header


def _apply_number_format(cell: Cell, role_format: str | None, value: CellValue) -> None:
    if role_format is not None and isinstance(value, (date, time)):
        cell.number_format = role_format


def _fill_fresh(sheet: Worksheet, table: Table) -> None:
    formats = [role.number_format for role in column_roles(table.headers)]
    for column_number, header in enumerate(table.headers, start=1):
        cell = sheet.cell(row=1, column=column_number, value=_header_value(header, column_number))
        cell.font = _HEADER_FONT
    for row_number, row in enumerate(table.rows, start=2):
        for column_number, value in enumerate(row, start=1):
            if value is None:
                continue
            cell = sheet.cell(row=row_number, column=column_number, value=value)
            role_format = formats[column_number - 1] if column_number <= len(formats) else None
            _apply_number_format(cell, role_format, value)


def _fill_preserving(sheet: Worksheet, table: Table) -> None:
    """Overwrite values in place; styles and formula cells stay as they are."""

    formats = [role.number_format for role in column_roles(table.headers)]
    width = max(table.width, sheet.max_column)
    for column_number in range(1, width + 1):
        header = table.headers[column_number - 1] if column_number <= len(table.headers) else ""
        cell = sheet.cell(row=1, column=column_number)
        value = _header_value(header, column_number)
        if cell.value != value:
            cell.value = value
            if value is not None:
                cell.font = _HEADER_FONT

    last_row = max(len(table.rows) + 1, sheet.max_row)
    for row_number in range(2, last_row + 1):
        index = row_number - 2
        row = table.rows[index] if index < len(table.rows) else ()
        for column_number in range(1, width + 1):
            value = row[column_number - 1] if column_number <= len(row) else None
            cell = sheet.cell(row=row_number, column=column_number)
            if cell.data_type == "f":
                continue
            if cell.value != value:
                cell.value = value
            role_format = formats[column_number - 1] if column_number <= len(formats) else None
            _apply_number_format(cell, role_format, value)


class OpenpyxlWriter:
    """Spreadsheet writer port backed by openpyxl."""

    def __init__(self, *, sheet_title: str = DEFAULT_SHEET_TITLE) -> None:
        self.sheet_title = sheet_title

    def write_table(self, path: Path, table: Table, *, preserve: bool = False) -> None:
        """Write ``table`` to ``path``.

        With ``preserve`` and an existing destination, values are updated inside
        that workbook's first worksheet, keeping its formatting; otherwise a new
        single-sheet workbook is built.
        """

        if preserve and path.exists():
            try:
                workbook = load_workbook(path)
            except WORKBOOK_READ_ERRORS as exc:
                raise SpreadsheetWriteError(f"Could not open {path} for update: {exc}") from exc
            _fill_preserving(workbook.worksheets[0], table)
        else:
            workbook = Workbook()
            sheet = workbook.active
            sheet.title = self.sheet_title
            _fill_fresh(sheet, table)

        _save_atomic(workbook, path)
        log.debug(f"Wrote {len(table)} rows to {path.name}")

    def write_match_report(self, path: Path, result: MatchResult) -> None:
        """Write statistics plus matched and unmatched entries of one join."""

        workbook = Workbook()
        statistics = workbook.active
        statistics.title = REPORT_STATISTICS
        rate = len(result.matched) / result.total * 100 if result.total else 0.0
        not_found = sum(1 for entry in result.unmatched if entry.reason is UnmatchedReason.NOT_FOUND)
        statistics.append(["Metric", "Value"])
        statistics.append(["Total records", result.total])
        statistics.append(["Matched", len(result.matched)])
        statistics.append(["Unmatched", len(result.unmatched)])
        statistics.append(["Not found", not_found])
        statistics.append(["Empty key", len(result.unmatched) - not_found])
        statistics.append(["Match rate (%)", round(rate, 2)])
        statistics.append(["Block start column", result.block_start + 1])
        statistics.append(["Block width", result.block_width])

        matched = workbook.create_sheet(REPORT_MATCHED)
        matched.append(["Key", "Source row", "Destination row"])
        for entry in result.matched:
            matched.append([entry.key, entry.source_row, entry.destination_row])

        unmatched = workbook.create_sheet(REPORT_UNMATCHED)
        unmatched.append(["Key", "Source row", "Reason"])
        for entry in result.unmatched:
            unmatched.append([entry.key, entry.source_row, str(entry.reason)])

        for sheet in workbook.worksheets:
            for cell in sheet[1]:
                cell.font = _HEADER_FONT

        _save_atomic(workbook, path)


__all__ = [
    "DEFAULT_SHEET_TITLE",
    "OpenpyxlWriter",
    "REPORT_MATCHED",
    "REPORT_STATISTICS",
    "REPORT_UNMATCHED",
    "SpreadsheetWriteError",
]
