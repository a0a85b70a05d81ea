"""Clear a fixed column block in place of manual spreadsheet cleanup."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sheetrecon.domain.types import Table, is_blank

from .contracts import CleanupResult

if TYPE_CHECKING:
    from sheetrecon.domain.types import CellValue, Row


def _clear(row: Row, start: int, stop: int) -> tuple[tuple[CellValue, ...], int]:
    cleared = 0
    cells = list(row)
    for column in range(start, min(stop + 1, len(cells))):
        if not is_blank(cells[column]):
            cleared += 1
        cells[column] = None
    return tuple(cells), cleared


def clear_column_block(table: Table, start: int, stop: int) -> CleanupResult:
    """Blank header and data cells in columns ``start``..``stop`` (0-based, inclusive).

    ``cleared`` counts data cells only; header cells are blanked alongside them.
    """

    if start < 0 or stop < start:
        raise ValueError(f"Invalid column block {start}..{stop}")

    headers, _ = _clear(table.headers, start, stop)
    cleared = 0
    rows = []
    for row in table.rows:
        new_row, count = _clear(row, start, stop)
        rows.append(new_row)
        cleared += count
    if not cleared:
        return CleanupResult(table=table)
    new_headers = tuple(header or "" for header in headers)
    return CleanupResult(table=Table(headers=new_headers, rows=tuple(rows)), cleared=cleared)


__all__ = ["clear_column_block"]
