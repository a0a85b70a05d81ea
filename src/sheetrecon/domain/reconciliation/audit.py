"""Advisory balance check over consolidation output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .contracts import ReconciliationResult


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationAudit:
    records_read: int
    unique_keys: int
    duplicates_in_read: int
    canonical_count: int
    duplicate_count: int
    new_duplicates: int
    carried_duplicates: int
    retained: int
    written: int
    balanced: bool

    @property
    def difference(self) -> int:
        """Gap reported when the totals do not reconcile."""

        return self.unique_keys - self.canonical_count + self.duplicate_count


def audit_reconciliation(result: ReconciliationResult) -> ReconciliationAudit:
    """Summarize ``result``; never raises, callers decide what an imbalance means."""

    counters = result.counters
    # unique_keys counts the whole canonical map, retained keys included, while
    # records_read counts source rows only. The canonical comparison therefore
    # always holds for engine output; only a read count below the key count
    # unbalances a run, which a rerun over a large prior canonical can trigger.
    duplicates_in_read = counters.records_read - counters.unique_keys
    canonical_count = len(result.canonical)
    return ReconciliationAudit(
        records_read=counters.records_read,
        unique_keys=counters.unique_keys,
        duplicates_in_read=duplicates_in_read,
        canonical_count=canonical_count,
        duplicate_count=len(result.duplicates),
        new_duplicates=counters.new_duplicates,
        carried_duplicates=counters.carried_duplicates,
        retained=counters.retained,
        written=counters.written,
        balanced=canonical_count == counters.unique_keys and duplicates_in_read >= 0,
    )


__all__ = ["ReconciliationAudit", "audit_reconciliation"]
