"""Record normalization ahead of keying.

Responsibilities of this stage:
- trim and collapse whitespace in string cells
- derive identity keys per record under a caller-chosen policy
- avoid any I/O
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sheetrecon.domain.keys import (
    CONSOLIDATION_KEY_POLICY,
    IdentitySelector,
    KeyPolicy,
    collapse_whitespace,
    identity_key,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from sheetrecon.domain.types import CellValue, Record, Table


def normalize_record(record: Mapping[str, CellValue]) -> Record:
    """Return a copy of ``record`` with string values trimmed and whitespace collapsed."""

    return {
        name: collapse_whitespace(value) if isinstance(value, str) else value
        for name, value in record.items()
    }


def keyed_records(
    records: Iterable[Mapping[str, CellValue]],
    *,
    selector: IdentitySelector,
    policy: KeyPolicy = CONSOLIDATION_KEY_POLICY,
) -> Iterator[tuple[str, Record]]:
    """Yield ``(key, normalized record)`` pairs, skipping records without identity."""

    for raw in records:
        record = normalize_record(raw)
        key = selector.key(record, policy)
        if key:
            yield key, record


def index_column(
    table: Table,
    column_index: int,
    *,
    policy: KeyPolicy,
    first_row: int,
) -> dict[str, int]:
    """Map each key in one column to the spreadsheet row holding it (last one wins)."""

    index: dict[str, int] = {}
    for offset, row in enumerate(table.rows):
        value = row[column_index] if column_index < len(row) else None
        key = identity_key(value, policy)
        if key:
            index[key] = first_row + offset
    return index


__all__ = ["index_column", "keyed_records", "normalize_record"]
