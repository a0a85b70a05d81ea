from __future__ import annotations

from datetime import date, datetime, time

import pytest

from sheetrecon.domain.temporal import (
    ColumnRole,
    Parsed,
    Unparseable,
    classify_column,
    guard_day,
    normalize_cell,
    normalize_table,
    parse_date,
    parse_time,
)
from sheetrecon.domain.types import Table


@pytest.mark.parametrize(
    ("header", "role"),
    [
        ("Fecha de ingreso", ColumnRole.DATE),
        ("FECHA", ColumnRole.DATE),
        ("Fecha y hora", ColumnRole.PLAIN),
        ("tArribo", ColumnRole.TIME),
        ("tiempoArribo", ColumnRole.PLAIN),
        ("TContacto", ColumnRole.TIME),
        ("Tipo", ColumnRole.PLAIN),
        ("Expediente", ColumnRole.PLAIN),
        ("", ColumnRole.PLAIN),
    ],
)
def test_classify_column(header: str, role: ColumnRole) -> None:
    assert classify_column(header) is role


def test_role_number_formats() -> None:
    assert ColumnRole.DATE.number_format == "dd/mm/yyyy"
    assert ColumnRole.TIME.number_format == "hh:mm:ss"
    assert ColumnRole.PLAIN.number_format is None


def test_day_month_year_round_trips() -> None:
    for year in range(1903, 2037):
        for month in range(1, 13):
            for day in range(1, 29):
                outcome = parse_date(f"{day}/{month}/{year}")
                assert outcome == Parsed(datetime(year, month, day))


@pytest.mark.parametrize("value", ["31/02/2023", "30/02/2024", "00/01/2023", "12/13/2023"])
def test_impossible_dates_are_unparseable(value: str) -> None:
    assert parse_date(value) == Unparseable(value)


def test_day_is_never_swapped_with_month() -> None:
    assert parse_date("03/04/2023") == Parsed(datetime(2023, 4, 3))


def test_day_guard_rebuilds_from_digits_when_days_disagree() -> None:
    assert guard_day("15/01/2023", datetime(2023, 1, 14)) == datetime(2023, 1, 15)
    assert guard_day("Ingreso 15-01-2023 08:00", datetime(2023, 1, 16, 8)) == datetime(
        2023, 1, 15
    )


def test_day_guard_drops_conversion_when_digits_are_invalid() -> None:
    assert guard_day("31/02/2023", datetime(2023, 3, 3)) is None


def test_day_guard_keeps_agreeing_or_digitless_conversions() -> None:
    assert guard_day("15/01/2023", datetime(2023, 1, 15)) == datetime(2023, 1, 15)
    assert guard_day(44926, datetime(2023, 1, 1)) == datetime(2023, 1, 1)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (44926, datetime(2023, 1, 1)),
        (44926.5, datetime(2023, 1, 1, 12, 0, 0)),
        ("44926", datetime(2023, 1, 1)),
        ("2023-01-15", datetime(2023, 1, 15)),
        ("5-6-2021", datetime(2021, 6, 5)),
        ("  7/8/2022  ", datetime(2022, 8, 7)),
        ("15/01/2023 08:30", datetime(2023, 1, 15, 8, 30)),
        ("15/01/2023 08:30:45", datetime(2023, 1, 15, 8, 30, 45)),
    ],
)
def test_parse_date_accepted_shapes(value: object, expected: datetime) -> None:
    assert parse_date(value) == Parsed(expected)


@pytest.mark.parametrize("value", [None, "", "  ", "mañana", True, 12, 99999, "2023/01/15", time(8, 0)])
def test_parse_date_rejects_everything_else(value: object) -> None:
    assert isinstance(parse_date(value), Unparseable)


def test_parse_date_passes_dates_through() -> None:
    moment = datetime(2022, 3, 4, 5, 6)
    assert parse_date(moment) == Parsed(moment)
    assert parse_date(date(2022, 3, 4)) == Parsed(date(2022, 3, 4))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("13:05", time(13, 5, 0)),
        ("7:05:09", time(7, 5, 9)),
        ("1:05:00 PM", time(13, 5, 0)),
        ("12:00 AM", time(0, 0, 0)),
        ("12:30 pm", time(12, 30, 0)),
        ("081500", time(8, 15, 0)),
        (0.5, time(12, 0, 0)),
        (0.25, time(6, 0, 0)),
        (0, time(0, 0, 0)),
    ],
)
def test_parse_time_accepted_shapes(value: object, expected: time) -> None:
    assert parse_time(value) == Parsed(expected)


@pytest.mark.parametrize("value", ["250000", "24:00", "10:60", "13:00 PM", "0:30 AM", 1.5, 0.9999999, "x"])
def test_parse_time_rejects_invalid_values(value: object) -> None:
    assert parse_time(value) == Unparseable(value)


@pytest.mark.parametrize(
    ("role", "value"),
    [
        (ColumnRole.DATE, "15/01/2023"),
        (ColumnRole.DATE, 44926),
        (ColumnRole.DATE, "31/02/2023"),
        (ColumnRole.TIME, "1:05:00 PM"),
        (ColumnRole.TIME, "250000"),
        (ColumnRole.PLAIN, "15/01/2023"),
    ],
)
def test_normalize_cell_is_idempotent(role: ColumnRole, value: object) -> None:
    once = normalize_cell(role, value)  # type: ignore[arg-type]
    assert normalize_cell(role, once) == once


def test_normalize_cell_keeps_unparseable_values() -> None:
    assert normalize_cell(ColumnRole.DATE, "31/02/2023") == "31/02/2023"
    assert normalize_cell(ColumnRole.TIME, None) is None


def test_normalize_table_touches_only_temporal_columns() -> None:
    table = Table(
        headers=("Expediente", "Fecha", "tArribo"),
        rows=(("15/01/2023", "15/01/2023", "13:05"), ("A", "sin fecha", None)),
    )

    normalized = normalize_table(table)

    assert normalized.headers == table.headers
    assert normalized.rows == (
        ("15/01/2023", datetime(2023, 1, 15), time(13, 5)),
        ("A", "sin fecha", None),
    )


def test_normalize_table_without_temporal_columns_is_unchanged() -> None:
    table = Table(headers=("Expediente", "Nombre"), rows=(("1", "Ana"),))

    assert normalize_table(table) is table
