"""Reconciliation core for consolidating, joining and syncing spreadsheet datasets.

Layered flow of a consolidation run:
1) normalize source records and derive identity keys
2) merge them over the prior canonical set, last occurrence wins
3) detect keys repeated within a single source and carry prior duplicates
4) audit the totals (advisory only)

The matcher, sync and cleanup stages operate on whole tables and never touch
columns outside the ones they own.
"""

from __future__ import annotations

from .audit import ReconciliationAudit, audit_reconciliation
from .cleanup import clear_column_block
from .contracts import (
    CleanupResult,
    MatchedEntry,
    MatchResult,
    ReconciliationCounters,
    ReconciliationResult,
    SyncResult,
    UnmatchedEntry,
    UnmatchedReason,
)
from .engine import reconcile
from .errors import MissingIdentityColumnError, ReservedBlockConflictError, identity_candidates
from .matching import match_into
from .normalize import index_column, keyed_records, normalize_record
from .sync import append_missing_records

__all__ = [
    "CleanupResult",
    "MatchResult",
    "MatchedEntry",
    "MissingIdentityColumnError",
    "ReconciliationAudit",
    "ReconciliationCounters",
    "ReconciliationResult",
    "ReservedBlockConflictError",
    "SyncResult",
    "UnmatchedEntry",
    "UnmatchedReason",
    "append_missing_records",
    "audit_reconciliation",
    "clear_column_block",
    "identity_candidates",
    "index_column",
    "keyed_records",
    "match_into",
    "normalize_record",
    "reconcile",
]
