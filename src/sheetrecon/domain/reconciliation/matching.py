"""Join a secondary dataset into a primary dataset by identity key.

The primary dataset is indexed once. Matched secondary records are copied into
a contiguous column block that starts at a fixed offset; columns before that
offset are never touched and no rows are added or removed. The new primary
table is assembled only after every secondary record has been looked up.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetrecon.domain.keys import JOIN_KEY_POLICY, identity_key
from sheetrecon.domain.types import FIRST_DATA_ROW, Table, is_blank, pad_row

from .contracts import MatchedEntry, MatchResult, UnmatchedEntry, UnmatchedReason
from .errors import MissingIdentityColumnError, ReservedBlockConflictError
from .normalize import index_column

if TYPE_CHECKING:
    from sheetrecon.domain.keys import KeyPolicy
    from sheetrecon.domain.types import CellValue

log = logging.getLogger(__name__)


def _resolve_column(table: Table, name: str | None, *, dataset: str) -> int:
    if name is None:
        if not table.headers:
            raise MissingIdentityColumnError("<first column>", available=(), dataset=dataset)
        return 0
    index = table.column_index(name)
    if index is None:
        raise MissingIdentityColumnError(name, available=table.headers, dataset=dataset)
    return index


def _check_reserved_block(primary: Table, *, offset: int, block_headers: tuple[str, ...]) -> None:
    """Allow only an empty block or a block previously written with the same headers."""

    for column in range(offset, primary.width):
        header = primary.headers[column] if column < len(primary.headers) else ""
        position = column - offset
        expected = block_headers[position] if position < len(block_headers) else None
        if header:
            if header != expected:
                raise ReservedBlockConflictError(offset=offset, column=column, existing=header)
            continue
        if any(not is_blank(primary.cell(row, column)) for row in range(len(primary))):
            raise ReservedBlockConflictError(offset=offset, column=column, existing=None)


def match_into(
    primary: Table,
    secondary: Table,
    *,
    secondary_key_column: str,
    primary_key_column: str | None = None,
    offset: int = 48,
    policy: KeyPolicy = JOIN_KEY_POLICY,
) -> MatchResult:
    """Copy fields of matching ``secondary`` records into ``primary``'s reserved block."""

    secondary_column = _resolve_column(secondary, secondary_key_column, dataset="secondary")
    primary_column = _resolve_column(primary, primary_key_column, dataset="primary")
    block_headers = secondary.headers
    _check_reserved_block(primary, offset=offset, block_headers=block_headers)

    index = index_column(primary, primary_column, policy=policy, first_row=FIRST_DATA_ROW)
    log.debug("Indexed %s primary keys", len(index))

    matched: list[MatchedEntry] = []
    unmatched: list[UnmatchedEntry] = []
    pending: dict[int, dict[int, CellValue]] = {}
    for position, row in enumerate(secondary.rows):
        if all(is_blank(value) for value in row):
            continue
        source_row = FIRST_DATA_ROW + position
        raw_key = row[secondary_column] if secondary_column < len(row) else None
        key = identity_key(raw_key, policy)
        if not key:
            unmatched.append(
                UnmatchedEntry(key=raw_key, source_row=source_row, reason=UnmatchedReason.EMPTY_KEY)
            )
            continue
        destination_row = index.get(key)
        if destination_row is None:
            unmatched.append(
                UnmatchedEntry(key=raw_key, source_row=source_row, reason=UnmatchedReason.NOT_FOUND)
            )
            continue

        cells = pending.setdefault(destination_row - FIRST_DATA_ROW, {})
        for column, value in enumerate(row[: len(block_headers)]):
            if not is_blank(value):
                cells[offset + column] = value
        matched.append(
            MatchedEntry(key=raw_key, source_row=source_row, destination_row=destination_row)
        )

    width = max(primary.width, offset + len(block_headers))
    headers = pad_row(primary.headers, width)
    headers[offset : offset + len(block_headers)] = block_headers
    rows = []
    for position, row in enumerate(primary.rows):
        cells = pad_row(row, width)
        for column, value in pending.get(position, {}).items():
            cells[column] = value
        rows.append(tuple(cells))

    table = Table(headers=tuple(header or "" for header in headers), rows=tuple(rows))
    return MatchResult(
        table=table,
        matched=matched,
        unmatched=unmatched,
        block_start=offset,
        block_width=len(block_headers),
    )


__all__ = ["match_into"]
