"""Read the first worksheet of an ``.xlsx`` file into a :class:`Table`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from sheetrecon.domain.types import Table

from .schema import SheetPayload

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)

WORKBOOK_READ_ERRORS = (OSError, BadZipFile, InvalidFileException, KeyError)


def read_sheet_payload(path: Path) -> SheetPayload | None:
    """Load ``path`` and validate its first worksheet; ``None`` when unreadable."""

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except WORKBOOK_READ_ERRORS:
        log.exception(f"Could not open workbook {path}")
        return None

    try:
        if not workbook.worksheets:
            log.warning(f"Workbook {path} has no worksheets")
            return None
        rows = list(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()

    if not rows:
        return SheetPayload(headers=[], rows=[])
    try:
        return SheetPayload.model_validate({"headers": rows[0], "rows": rows[1:]})
    except ValidationError:
        log.exception(f"Unexpected sheet layout in {path}")
        return None


class OpenpyxlReader:
    """Spreadsheet reader port backed by openpyxl.

    Unreadable files yield an empty table; the caller decides whether that
    aborts the stage.
    """

    def __call__(self, path: Path) -> Table:
        payload = read_sheet_payload(path)
        if payload is None:
            return Table()
        table = payload.to_table()
        log.debug(f"Read {len(table)} rows x {len(table.headers)} columns from {path.name}")
        return table


__all__ = ["WORKBOOK_READ_ERRORS", "OpenpyxlReader", "read_sheet_payload"]
