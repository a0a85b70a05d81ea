"""Core value types shared by the reconciliation components.

A spreadsheet is modelled as an immutable :class:`Table`: a header tuple plus
positional rows. Components never mutate a table they were handed; they build
a new one, so the caller decides when (and whether) it replaces what is on disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping, Sequence


CellValue: TypeAlias = str | int | float | bool | datetime | date | time | None
Row: TypeAlias = tuple[CellValue, ...]
Record: TypeAlias = dict[str, CellValue]

# Spreadsheet row of the first data row (row 1 holds the header).
FIRST_DATA_ROW = 2


def is_blank(value: object) -> bool:
    """Return True for cells that carry no data."""

    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(frozen=True, slots=True)
class Table:
    """Header row plus data rows, positional and immutable."""

    headers: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, CellValue]]) -> Table:
        """Build a table whose header is the union of record fields in first-seen order."""

        materialized = list(records)
        headers: list[str] = []
        seen: set[str] = set()
        for record in materialized:
            for name in record:
                if name not in seen:
                    seen.add(name)
                    headers.append(name)
        rows = tuple(tuple(record.get(name) for name in headers) for record in materialized)
        return cls(headers=tuple(headers), rows=rows)

    @property
    def width(self) -> int:
        return max([len(self.headers), *(len(row) for row in self.rows)])

    def __len__(self) -> int:
        return len(self.rows)

    def __bool__(self) -> bool:
        return bool(self.headers) or bool(self.rows)

    def column_index(self, name: str) -> int | None:
        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def cell(self, row_index: int, column_index: int) -> CellValue:
        row = self.rows[row_index]
        return row[column_index] if column_index < len(row) else None

    def records(self) -> Iterator[Record]:
        """Yield every row as a field-name mapping (unnamed columns are skipped)."""

        for row in self.rows:
            yield {
                name: (row[index] if index < len(row) else None)
                for index, name in enumerate(self.headers)
                if name
            }

    def with_rows(self, rows: Sequence[Row]) -> Table:
        return Table(headers=self.headers, rows=tuple(rows))


@dataclass(frozen=True, slots=True)
class SourceDataset:
    """One input spreadsheet's records for one run."""

    name: str
    table: Table = field(default_factory=Table)

    def records(self) -> Iterator[Record]:
        return self.table.records()


def pad_row(row: Row, width: int) -> list[CellValue]:
    """Return ``row`` as a list extended with empty cells up to ``width``."""

    cells = list(row)
    if len(cells) < width:
        cells.extend([None] * (width - len(cells)))
    return cells


__all__ = [
    "FIRST_DATA_ROW",
    "CellValue",
    "Record",
    "Row",
    "SourceDataset",
    "Table",
    "is_blank",
    "pad_row",
]
