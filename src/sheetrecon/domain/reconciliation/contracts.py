"""Shared reconciliation result types.

This module intentionally holds only:
- result dataclasses returned by the engine, matcher, sync and cleanup stages
- audit entry dataclasses and reason enums used inside those results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

from sheetrecon.domain.types import Table

if TYPE_CHECKING:
    from sheetrecon.domain.types import CellValue, Record


RecordsByKey: TypeAlias = "dict[str, Record]"


@dataclass(slots=True, kw_only=True)
class ReconciliationCounters:
    """Audit counters for one consolidation run."""

    sources_processed: int = 0
    records_read: int = 0
    unique_keys: int = 0
    retained: int = 0
    written: int = 0
    new_duplicates: int = 0
    carried_duplicates: int = 0


@dataclass(slots=True, kw_only=True)
class ReconciliationResult:
    """New canonical and duplicate sets plus counters."""

    canonical: RecordsByKey = field(default_factory=dict[str, "Record"])
    duplicates: RecordsByKey = field(default_factory=dict[str, "Record"])
    counters: ReconciliationCounters = field(default_factory=ReconciliationCounters)
    processed_sources: tuple[str, ...] = ()
    internal_repeats: dict[str, int] = field(default_factory=dict[str, int])
    noop: bool = False

    def canonical_table(self) -> Table:
        return Table.from_records(self.canonical.values())

    def duplicates_table(self) -> Table:
        return Table.from_records(self.duplicates.values())


class UnmatchedReason(StrEnum):
    """Why a secondary record was not joined into the primary dataset."""

    EMPTY_KEY = "empty-key"
    NOT_FOUND = "not-found"


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchedEntry:
    key: CellValue
    source_row: int
    destination_row: int


@dataclass(frozen=True, slots=True, kw_only=True)
class UnmatchedEntry:
    key: CellValue
    source_row: int
    reason: UnmatchedReason


@dataclass(slots=True, kw_only=True)
class MatchResult:
    """Primary table with the appended block, plus per-record audit entries."""

    table: Table
    matched: list[MatchedEntry] = field(default_factory=list[MatchedEntry])
    unmatched: list[UnmatchedEntry] = field(default_factory=list[UnmatchedEntry])
    block_start: int = 0
    block_width: int = 0

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.unmatched)


@dataclass(slots=True, kw_only=True)
class SyncResult:
    """Target table after appending records it was missing."""

    table: Table
    appended_keys: list[str] = field(default_factory=list[str])

    @property
    def appended(self) -> int:
        return len(self.appended_keys)


@dataclass(slots=True, kw_only=True)
class CleanupResult:
    table: Table
    cleared: int = 0


__all__ = [
    "CleanupResult",
    "MatchResult",
    "MatchedEntry",
    "ReconciliationCounters",
    "ReconciliationResult",
    "RecordsByKey",
    "SyncResult",
    "UnmatchedEntry",
    "UnmatchedReason",
]
