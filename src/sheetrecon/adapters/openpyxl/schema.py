"""Pydantic model describing the first worksheet of a workbook as read from disk."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from sheetrecon.domain.types import Table, is_blank

PLACEHOLDER_PREFIX = "Columna_"


def placeholder_header(column_number: int) -> str:
    """Header used for a column whose header cell is blank (1-based column number)."""

    return f"{PLACEHOLDER_PREFIX}{column_number}"


def _last_filled(cells: list[Any]) -> int:
    for index in range(len(cells) - 1, -1, -1):
        if not is_blank(cells[index]):
            return index + 1
    return 0


class SheetPayload(BaseModel):
    """Header row plus data rows, trimmed to the used range."""

    model_config = ConfigDict(extra="forbid")

    headers: list[str]
    rows: list[list[Any]]

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return [None if is_blank(cell) else str(cell).strip() for cell in value]
        return value

    @field_validator("rows", mode="before")
    @classmethod
    def _drop_trailing_empty_rows(cls, value: object) -> object:
        # Interior blank rows stay so row positions keep matching sheet rows.
        if isinstance(value, (list, tuple)):
            rows = [list(row) for row in value]
            while rows and all(is_blank(cell) for cell in rows[-1]):
                rows.pop()
            return rows
        return value

    @model_validator(mode="before")
    @classmethod
    def _fill_headers(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        data: dict[str, Any] = dict(value)
        raw_headers = [None if is_blank(cell) else cell for cell in data.get("headers") or ()]
        rows = [list(row) for row in data.get("rows") or ()]
        width = max([_last_filled(raw_headers), *(_last_filled(row) for row in rows)])
        data["headers"] = [
            placeholder_header(index + 1) if index >= len(raw_headers) or raw_headers[index] is None
            else raw_headers[index]
            for index in range(width)
        ]
        data["rows"] = [row[:width] for row in rows]
        return data

    def to_table(self) -> Table:
        width = len(self.headers)
        rows = tuple(tuple(row) + (None,) * (width - len(row)) for row in self.rows)
        return Table(headers=tuple(self.headers), rows=rows)


__all__ = ["PLACEHOLDER_PREFIX", "SheetPayload", "placeholder_header"]
