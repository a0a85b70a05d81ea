"""Bring a working copy up to date with the canonical dataset.

Only rows whose first-column key the target lacks are appended; existing
target rows (including any columns appended by the matcher) stay untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sheetrecon.domain.keys import JOIN_KEY_POLICY, identity_key
from sheetrecon.domain.types import FIRST_DATA_ROW, Table, pad_row

from .contracts import SyncResult
from .normalize import index_column

if TYPE_CHECKING:
    from sheetrecon.domain.keys import KeyPolicy

log = logging.getLogger(__name__)

_KEY_COLUMN = 0


def append_missing_records(
    target: Table,
    source: Table,
    *,
    policy: KeyPolicy = JOIN_KEY_POLICY,
) -> SyncResult:
    """Append ``source`` rows whose key is absent from ``target``.

    Rows are copied positionally. When the target has no header yet, the
    source header is adopted. A key repeated in ``source`` is appended once.
    """

    known = set(index_column(target, _KEY_COLUMN, policy=policy, first_row=FIRST_DATA_ROW))
    headers = target.headers or source.headers
    width = max(len(headers), target.width, source.width)

    appended_keys: list[str] = []
    appended_rows = []
    for row in source.rows:
        key = identity_key(row[_KEY_COLUMN] if row else None, policy)
        if not key or key in known:
            continue
        known.add(key)
        appended_keys.append(key)
        appended_rows.append(tuple(pad_row(row, width)))

    if not appended_keys:
        log.debug("Target already holds all %s source keys", len(source))
        return SyncResult(table=target)

    table = Table(headers=headers, rows=(*target.rows, *appended_rows))
    return SyncResult(table=table, appended_keys=appended_keys)


__all__ = ["append_missing_records"]
