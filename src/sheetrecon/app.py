"""Application orchestration entry points.

Each stage reads what it needs, builds the complete new content in memory, and
only then backs up and replaces the destination file.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Generic, TypeAlias, TypeVar

from sheetrecon.adapters.backup import create_backup
from sheetrecon.adapters.filesystem import discover_sources
from sheetrecon.adapters.openpyxl import OpenpyxlReader, OpenpyxlWriter
from sheetrecon.config import get_reconcile_config, get_workspace_config
from sheetrecon.domain.keys import IdentitySelector, KeyPolicy, WhitespacePolicy
from sheetrecon.domain.reconciliation import (
    append_missing_records,
    audit_reconciliation,
    clear_column_block,
    identity_candidates,
    match_into,
    reconcile,
)
from sheetrecon.domain.temporal import normalize_table
from sheetrecon.domain.types import SourceDataset

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sheetrecon.config import ReconcileConfig, WorkspaceConfig
    from sheetrecon.domain.ports import SpreadsheetReader, SpreadsheetWriter
    from sheetrecon.domain.reconciliation import (
        CleanupResult,
        MatchResult,
        ReconciliationAudit,
        ReconciliationResult,
        SyncResult,
    )
    from sheetrecon.domain.types import Table

Clock: TypeAlias = "Callable[[], datetime]"

T = TypeVar("T")


log = getLogger(__name__)


class StageAbortedError(RuntimeError):
    """A stage could not run because an input is missing or unreadable; nothing was written."""


@dataclass(slots=True, kw_only=True)
class ConsolidationOutcome:
    result: ReconciliationResult
    audit: ReconciliationAudit
    sources: tuple[Path, ...] = ()
    written: bool = False


@dataclass(slots=True, kw_only=True)
class StageOutcome(Generic[T]):
    """Result of one file-updating stage and whether the destination was replaced."""

    result: T
    written: bool = False
    backup: Path | None = None


@dataclass(slots=True, kw_only=True)
class FullProcessOutcome:
    consolidation: ConsolidationOutcome
    sync: StageOutcome[SyncResult]
    merge: StageOutcome[MatchResult]


def _read_required(reader: SpreadsheetReader, path: Path, *, label: str) -> Table:
    if not path.exists():
        raise StageAbortedError(f"{label} {path} does not exist")
    table = reader(path)
    if not table.headers:
        raise StageAbortedError(f"Could not read any data from {label} {path}")
    return table


def _read_prior(reader: SpreadsheetReader, path: Path, *, label: str) -> Table | None:
    if not path.exists():
        log.info(f"No existing {label} at {path}; starting empty")
        return None
    table = reader(path)
    if not table:
        raise StageAbortedError(
            f"Existing {label} {path} could not be read; refusing to overwrite it"
        )
    log.info(f"Loaded {len(table)} records from existing {label}")
    return table


def _replace(
    path: Path,
    table: Table,
    *,
    writer: SpreadsheetWriter,
    clock: Clock,
    preserve: bool,
) -> Path | None:
    backup = create_backup(path, clock=clock)
    writer.write_table(path, table, preserve=preserve)
    return backup


def _warn_missing_identity(datasets: list[SourceDataset], column: str | None) -> None:
    if column is None:
        return
    for dataset in datasets:
        headers = dataset.table.headers
        if headers and column not in headers:
            candidates = ", ".join(identity_candidates(headers)) or "none"
            log.warning(
                f"{dataset.name}: column {column!r} not found, keying on first column "
                f"{headers[0]!r} (possible identity columns: {candidates})"
            )


def _log_audit(audit: ReconciliationAudit) -> None:
    log.info(
        f"Reconciliation totals: read={audit.records_read}, unique={audit.unique_keys}, "
        f"repeated_in_read={audit.duplicates_in_read}, canonical={audit.canonical_count}, "
        f"duplicates={audit.duplicate_count} (new={audit.new_duplicates}, "
        f"carried={audit.carried_duplicates}), retained={audit.retained}, "
        f"written={audit.written}"
    )
    if not audit.balanced:
        log.warning(f"Totals do not reconcile; difference={audit.difference}")


def consolidate_sources(
    *,
    workspace: WorkspaceConfig | None = None,
    settings: ReconcileConfig | None = None,
    reader: SpreadsheetReader | None = None,
    writer: SpreadsheetWriter | None = None,
    clock: Clock = datetime.now,
) -> ConsolidationOutcome:
    """Fold every source workbook into the canonical and duplicate files."""

    workspace = workspace or get_workspace_config()
    settings = settings or get_reconcile_config()
    reader = reader or OpenpyxlReader()
    writer = writer or OpenpyxlWriter()

    data_dir = workspace.ensure_data_dir()
    paths = discover_sources(data_dir, exclude=workspace.output_filenames)
    log.info(
        "Starting consolidation: data_dir=%s, sources=%s, identity_column=%s",
        data_dir,
        len(paths),
        settings.identity_column,
    )

    prior_canonical = _read_prior(reader, workspace.canonical_path, label="canonical file")
    prior_duplicates = _read_prior(reader, workspace.duplicates_path, label="duplicates file")
    datasets = [SourceDataset(name=path.name, table=reader(path)) for path in paths]
    _warn_missing_identity(datasets, settings.identity_column)

    result = reconcile(
        datasets,
        prior_canonical=prior_canonical,
        prior_duplicates=prior_duplicates,
        selector=IdentitySelector(field=settings.identity_column),
    )
    audit = audit_reconciliation(result)
    _log_audit(audit)
    outcome = ConsolidationOutcome(result=result, audit=audit, sources=tuple(paths))
    if result.noop:
        log.info("No source workbooks found; canonical file left unchanged")
        return outcome
    if not result.canonical and prior_canonical is None:
        log.warning("No records with an identity value were found; nothing written")
        return outcome

    canonical = normalize_table(result.canonical_table())
    duplicates = normalize_table(result.duplicates_table())
    _replace(workspace.canonical_path, canonical, writer=writer, clock=clock, preserve=False)
    # Duplicates only ever grow, so an empty set means no file has been written yet.
    if duplicates:
        _replace(workspace.duplicates_path, duplicates, writer=writer, clock=clock, preserve=False)
    outcome.written = True

    log.info(
        f"Finished consolidation: canonical={len(canonical)}, duplicates={len(duplicates)}, "
        f"sources={', '.join(result.processed_sources)}"
    )
    return outcome


def sync_merge_workspace(
    *,
    workspace: WorkspaceConfig | None = None,
    reader: SpreadsheetReader | None = None,
    writer: SpreadsheetWriter | None = None,
    clock: Clock = datetime.now,
) -> StageOutcome[SyncResult]:
    """Append canonical records that the merge workspace copy does not have yet."""

    workspace = workspace or get_workspace_config()
    reader = reader or OpenpyxlReader()
    writer = writer or OpenpyxlWriter()
    workspace.ensure_merge_dir()

    log.info(f"Starting workspace sync: {workspace.merge_primary_path}")
    source = _read_required(reader, workspace.canonical_path, label="canonical file")
    target = _read_required(reader, workspace.merge_primary_path, label="merge copy")

    result = append_missing_records(target, source)
    if not result.appended:
        log.info("Merge copy already up to date; nothing appended")
        return StageOutcome(result=result)

    backup = _replace(
        workspace.merge_primary_path, result.table, writer=writer, clock=clock, preserve=True
    )
    log.info(f"Finished workspace sync: appended={result.appended}, total={len(result.table)}")
    return StageOutcome(result=result, written=True, backup=backup)


def merge_secondary(
    *,
    workspace: WorkspaceConfig | None = None,
    settings: ReconcileConfig | None = None,
    reader: SpreadsheetReader | None = None,
    writer: SpreadsheetWriter | None = None,
    clock: Clock = datetime.now,
) -> StageOutcome[MatchResult]:
    """Join the secondary workbook into the merge copy and write the match report."""

    workspace = workspace or get_workspace_config()
    settings = settings or get_reconcile_config()
    reader = reader or OpenpyxlReader()
    writer = writer or OpenpyxlWriter()
    workspace.ensure_merge_dir()

    log.info(
        "Starting merge: key_column=%s, offset=%s, case=%s",
        settings.merge_key_column,
        settings.merge_offset,
        settings.join_case,
    )
    primary = _read_required(reader, workspace.merge_primary_path, label="merge copy")
    secondary = _read_required(reader, workspace.merge_secondary_path, label="secondary file")

    result = match_into(
        primary,
        secondary,
        secondary_key_column=settings.merge_key_column,
        offset=settings.merge_offset,
        policy=KeyPolicy(whitespace=WhitespacePolicy.STRIP, case=settings.join_case),
    )
    log.info(f"Merge lookups: matched={len(result.matched)}, unmatched={len(result.unmatched)}")
    if not result.matched:
        log.info("No secondary record matched; merge copy left unchanged")
        return StageOutcome(result=result)

    backup = _replace(
        workspace.merge_primary_path, result.table, writer=writer, clock=clock, preserve=True
    )
    create_backup(workspace.report_path, clock=clock)
    writer.write_match_report(workspace.report_path, result)
    log.info(f"Finished merge: report written to {workspace.report_path}")
    return StageOutcome(result=result, written=True, backup=backup)


def clean_reserved_block(
    *,
    workspace: WorkspaceConfig | None = None,
    settings: ReconcileConfig | None = None,
    reader: SpreadsheetReader | None = None,
    writer: SpreadsheetWriter | None = None,
    clock: Clock = datetime.now,
) -> StageOutcome[CleanupResult]:
    """Clear the configured column block of the canonical file."""

    workspace = workspace or get_workspace_config()
    settings = settings or get_reconcile_config()
    reader = reader or OpenpyxlReader()
    writer = writer or OpenpyxlWriter()

    first, last = settings.cleanup_columns
    log.info(f"Starting cleanup of columns {first}:{last} in {workspace.canonical_path}")
    table = _read_required(reader, workspace.canonical_path, label="canonical file")

    start, stop = settings.cleanup_range
    result = clear_column_block(table, start, stop)
    if not result.cleared:
        log.info("Nothing to clear; canonical file left unchanged")
        return StageOutcome(result=result)

    backup = _replace(
        workspace.canonical_path, result.table, writer=writer, clock=clock, preserve=True
    )
    log.info(f"Finished cleanup: cleared={result.cleared}")
    return StageOutcome(result=result, written=True, backup=backup)


def run_full_process(
    *,
    workspace: WorkspaceConfig | None = None,
    settings: ReconcileConfig | None = None,
    reader: SpreadsheetReader | None = None,
    writer: SpreadsheetWriter | None = None,
    clock: Clock = datetime.now,
) -> FullProcessOutcome:
    """Consolidate, sync, then merge; the first failing stage stops the run."""

    workspace = workspace or get_workspace_config()
    settings = settings or get_reconcile_config()
    reader = reader or OpenpyxlReader()
    writer = writer or OpenpyxlWriter()

    log.info("Stage 1/3: consolidation")
    consolidation = consolidate_sources(
        workspace=workspace, settings=settings, reader=reader, writer=writer, clock=clock
    )
    log.info("Stage 2/3: workspace sync")
    sync = sync_merge_workspace(workspace=workspace, reader=reader, writer=writer, clock=clock)
    log.info("Stage 3/3: merge")
    merge = merge_secondary(
        workspace=workspace, settings=settings, reader=reader, writer=writer, clock=clock
    )
    log.info("Full process completed")
    return FullProcessOutcome(consolidation=consolidation, sync=sync, merge=merge)


__all__ = [
    "ConsolidationOutcome",
    "FullProcessOutcome",
    "StageAbortedError",
    "StageOutcome",
    "clean_reserved_block",
    "consolidate_sources",
    "merge_secondary",
    "run_full_process",
    "sync_merge_workspace",
]
