from __future__ import annotations

from sheetrecon.domain.keys import CONSOLIDATION_KEY_POLICY, JOIN_KEY_POLICY, IdentitySelector
from sheetrecon.domain.reconciliation import index_column, keyed_records, normalize_record
from tests.helpers.workbooks import make_table


def test_normalize_record_collapses_strings_only() -> None:
    record = {"Nombre": "  Ana   María ", "Monto": 10.5, "Vacío": None}

    assert normalize_record(record) == {"Nombre": "Ana María", "Monto": 10.5, "Vacío": None}


def test_keyed_records_skip_records_without_identity() -> None:
    records = [{"Expediente": " E 1 "}, {"Expediente": None}, {"Expediente": ""}]

    pairs = list(
        keyed_records(records, selector=IdentitySelector(field="Expediente"), policy=CONSOLIDATION_KEY_POLICY)
    )

    assert pairs == [("E 1", {"Expediente": "E 1"})]


def test_index_column_maps_keys_to_spreadsheet_rows() -> None:
    table = make_table(("Expediente",), ("A 1",), (None,), ("B2",), ("A1",))

    index = index_column(table, 0, policy=JOIN_KEY_POLICY, first_row=2)

    assert index == {"A1": 5, "B2": 4}
