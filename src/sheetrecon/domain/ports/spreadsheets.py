"""Ports for reading and writing tabular spreadsheet files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from sheetrecon.domain.reconciliation import MatchResult
    from sheetrecon.domain.types import Table


@runtime_checkable
class SpreadsheetReader(Protocol):
    """Return the first sheet of a file as a table (empty when unreadable)."""

    def __call__(self, path: Path) -> Table: ...


@runtime_checkable
class SpreadsheetWriter(Protocol):
    """Persist tables; ``preserve`` keeps the existing workbook's formatting."""

    def write_table(self, path: Path, table: Table, *, preserve: bool = False) -> None: ...

    def write_match_report(self, path: Path, result: MatchResult) -> None: ...


__all__ = ["SpreadsheetReader", "SpreadsheetWriter"]
