from __future__ import annotations

from sheetrecon.domain.reconciliation import append_missing_records
from tests.helpers.workbooks import make_table


def test_missing_keys_are_appended_after_existing_rows() -> None:
    target = make_table(
        ("Expediente", "Nombre", "", "Pieza"),
        ("E-1", "Ana", None, "P-1"),
        ("E-2", "Luis", None, None),
    )
    source = make_table(
        ("Expediente", "Nombre"),
        ("E-1", "Ana (actualizada)"),
        (" E-3 ", "Eva"),
        ("E 4", "Sol"),
    )

    result = append_missing_records(target, source)

    assert result.appended == 2
    assert result.appended_keys == ["E-3", "E4"]
    assert result.table.headers == target.headers
    assert result.table.rows[:2] == target.rows
    assert result.table.rows[2:] == ((" E-3 ", "Eva", None, None), ("E 4", "Sol", None, None))


def test_nothing_to_append_returns_target_unchanged() -> None:
    target = make_table(("Expediente",), ("E-1",), ("E-2",))
    source = make_table(("Expediente",), ("E-2",), ("E-1",))

    result = append_missing_records(target, source)

    assert result.appended == 0
    assert result.table is target


def test_repeated_source_keys_are_appended_once() -> None:
    target = make_table(("Expediente", "Nombre"), ("E-1", "Ana"))
    source = make_table(("Expediente", "Nombre"), ("E-5", "primero"), ("E-5", "segundo"), (None, "x"))

    result = append_missing_records(target, source)

    assert result.appended_keys == ["E-5"]
    assert result.table.rows[-1] == ("E-5", "primero")
