"""Accumulating consolidation of source datasets into canonical and duplicate sets.

Semantics in short:
- the prior canonical set seeds the working map; every newly read record then
  overwrites the entry for its key, so the last occurrence in processing order wins
- a key is a duplicate when it repeats inside one source dataset; the same key
  showing up in two different sources is ordinary accumulation
- prior duplicates are carried forward with their stored record, forever
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from sheetrecon.domain.keys import CONSOLIDATION_KEY_POLICY, IdentitySelector

from .contracts import ReconciliationCounters, ReconciliationResult
from .normalize import keyed_records

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sheetrecon.domain.keys import KeyPolicy
    from sheetrecon.domain.types import SourceDataset, Table

    from .contracts import RecordsByKey

log = logging.getLogger(__name__)


def _load_prior(
    table: Table | None,
    *,
    selector: IdentitySelector,
    policy: KeyPolicy,
) -> RecordsByKey:
    records: RecordsByKey = {}
    if table is None:
        return records
    for key, record in keyed_records(table.records(), selector=selector, policy=policy):
        records[key] = record
    return records


def reconcile(
    sources: Sequence[SourceDataset],
    *,
    prior_canonical: Table | None = None,
    prior_duplicates: Table | None = None,
    selector: IdentitySelector | None = None,
    policy: KeyPolicy = CONSOLIDATION_KEY_POLICY,
) -> ReconciliationResult:
    """Merge ``sources`` (in order) on top of the prior canonical/duplicate state."""

    selector = selector or IdentitySelector()
    canonical = _load_prior(prior_canonical, selector=selector, policy=policy)
    previous_duplicates = _load_prior(prior_duplicates, selector=selector, policy=policy)
    retained = len(canonical)

    if not sources and prior_canonical is not None:
        log.debug("No source datasets; keeping %s canonical records unchanged", retained)
        return ReconciliationResult(
            canonical=canonical,
            duplicates=previous_duplicates,
            counters=ReconciliationCounters(
                unique_keys=retained,
                retained=retained,
                carried_duplicates=len(previous_duplicates),
            ),
            noop=True,
        )

    records_read = 0
    repeated: dict[str, int] = {}
    for source in sources:
        occurrences: Counter[str] = Counter()
        for key, record in keyed_records(source.records(), selector=selector, policy=policy):
            canonical[key] = record
            occurrences[key] += 1
            records_read += 1

        internal = {key: count for key, count in occurrences.items() if count > 1}
        for key, count in internal.items():
            repeated[key] = max(count, repeated.get(key, 0))
        log.debug(
            "%s: %s keyed records, %s repeated keys",
            source.name,
            occurrences.total(),
            len(internal),
        )

    duplicates: RecordsByKey = {}
    new_duplicates = 0
    carried_duplicates = 0
    for key, record in canonical.items():
        if key in previous_duplicates:
            duplicates[key] = previous_duplicates[key]
            carried_duplicates += 1
        elif key in repeated:
            duplicates[key] = record
            new_duplicates += 1
    for key, record in previous_duplicates.items():
        if key not in duplicates:
            duplicates[key] = record
            carried_duplicates += 1

    counters = ReconciliationCounters(
        sources_processed=len(sources),
        records_read=records_read,
        unique_keys=len(canonical),
        retained=retained,
        written=len(canonical) - retained,
        new_duplicates=new_duplicates,
        carried_duplicates=carried_duplicates,
    )
    return ReconciliationResult(
        canonical=canonical,
        duplicates=duplicates,
        counters=counters,
        processed_sources=tuple(source.name for source in sources),
        internal_repeats=repeated,
    )


__all__ = ["reconcile"]
