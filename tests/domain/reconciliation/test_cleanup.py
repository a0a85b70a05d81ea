from __future__ import annotations

import pytest

from sheetrecon.domain.reconciliation import clear_column_block
from tests.helpers.workbooks import make_table


def test_block_is_cleared_including_headers() -> None:
    table = make_table(
        ("A", "B", "C", "D"),
        (1, 2, 3, 4),
        (5, None, 7, 8),
    )

    result = clear_column_block(table, 1, 2)

    assert result.cleared == 3
    assert result.table.headers == ("A", "", "", "D")
    assert result.table.rows == ((1, None, None, 4), (5, None, None, 8))


def test_block_beyond_table_width_clears_nothing() -> None:
    table = make_table(("A", "B"), (1, 2))

    result = clear_column_block(table, 5, 9)

    assert result.cleared == 0
    assert result.table is table


def test_invalid_block_is_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid column block"):
        clear_column_block(make_table(("A",)), 3, 1)
