from __future__ import annotations

from sheetrecon.domain.keys import IdentitySelector
from sheetrecon.domain.reconciliation import (
    ReconciliationCounters,
    ReconciliationResult,
    audit_reconciliation,
    reconcile,
)
from tests.helpers.workbooks import make_source, make_table


def test_audit_of_consistent_run_is_balanced() -> None:
    headers = ("Expediente", "Origen")
    result = reconcile(
        [
            make_source("a.xlsx", headers, (1, "A"), (2, "A"), (2, "A")),
            make_source("b.xlsx", headers, (2, "B"), (3, "B")),
        ],
        selector=IdentitySelector(field="Expediente"),
    )

    audit = audit_reconciliation(result)

    assert audit.balanced
    assert audit.records_read == 5
    assert audit.unique_keys == 3
    assert audit.duplicates_in_read == 2
    assert audit.canonical_count == 3
    assert audit.duplicate_count == 1
    assert audit.new_duplicates == 1


def test_audit_reports_imbalance_without_raising() -> None:
    result = ReconciliationResult(
        canonical={"1": {"Expediente": "1"}},
        duplicates={"1": {"Expediente": "1"}},
        counters=ReconciliationCounters(records_read=4, unique_keys=3),
    )

    audit = audit_reconciliation(result)

    assert not audit.balanced
    assert audit.difference == 3 - 1 + 1


def test_audit_flags_more_keys_than_records_read() -> None:
    result = ReconciliationResult(
        canonical={"1": {}, "2": {}},
        counters=ReconciliationCounters(records_read=1, unique_keys=2),
    )

    audit = audit_reconciliation(result)

    assert audit.duplicates_in_read == -1
    assert not audit.balanced


def test_rerun_over_prior_canonical_counts_retained_keys_as_unique() -> None:
    headers = ("Expediente", "Origen")
    prior = make_table(headers, (1, "viejo"), (2, "viejo"))
    result = reconcile(
        [make_source("c.xlsx", headers, (3, "C"))],
        prior_canonical=prior,
        selector=IdentitySelector(field="Expediente"),
    )

    audit = audit_reconciliation(result)

    assert audit.unique_keys == audit.canonical_count == 3
    assert audit.records_read == 1
    assert audit.duplicates_in_read == -2
    assert not audit.balanced
