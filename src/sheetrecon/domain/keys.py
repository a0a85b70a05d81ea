"""Identity key derivation.

Keys are plain strings so they can be compared across files regardless of how a
spreadsheet library typed the cell. Callers pick the whitespace and case policy
per use site: consolidation collapses whitespace runs, cross-file joins strip
whitespace entirely. Neither folds case unless asked to.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import CellValue, Record

_WHITESPACE_RUN = re.compile(r"\s+")


class WhitespacePolicy(StrEnum):
    """How internal whitespace is treated once a string is trimmed."""

    COLLAPSE = "collapse"
    STRIP = "strip"


class CasePolicy(StrEnum):
    """Whether keys compare case-sensitively."""

    SENSITIVE = "sensitive"
    FOLD = "fold"


@dataclass(frozen=True, slots=True)
class KeyPolicy:
    whitespace: WhitespacePolicy = WhitespacePolicy.COLLAPSE
    case: CasePolicy = CasePolicy.SENSITIVE


CONSOLIDATION_KEY_POLICY = KeyPolicy(whitespace=WhitespacePolicy.COLLAPSE)
JOIN_KEY_POLICY = KeyPolicy(whitespace=WhitespacePolicy.STRIP)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text.strip())


def _number_text(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def identity_key(value: CellValue, policy: KeyPolicy = CONSOLIDATION_KEY_POLICY) -> str:
    """Return the canonical identity string for ``value``; ``""`` means no identity."""

    if value is None:
        return ""
    if isinstance(value, (datetime, date, time)):
        text = value.isoformat()
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, float):
        text = _number_text(value)
    else:
        text = str(value)

    if policy.whitespace is WhitespacePolicy.STRIP:
        text = _WHITESPACE_RUN.sub("", text)
    else:
        text = collapse_whitespace(text)

    if policy.case is CasePolicy.FOLD:
        text = text.casefold()
    return text


@dataclass(frozen=True, slots=True)
class IdentitySelector:
    """Pick the identifying field of a record.

    ``field`` names the designated column. When it is ``None``, or a record has
    no such column, the record's first column is used instead.
    """

    field: str | None = None

    def value(self, record: Record) -> CellValue:
        if self.field is not None and self.field in record:
            return record[self.field]
        for first in record.values():
            return first
        return None

    def key(self, record: Record, policy: KeyPolicy = CONSOLIDATION_KEY_POLICY) -> str:
        return identity_key(self.value(record), policy)


__all__ = [
    "CONSOLIDATION_KEY_POLICY",
    "JOIN_KEY_POLICY",
    "CasePolicy",
    "IdentitySelector",
    "KeyPolicy",
    "WhitespacePolicy",
    "collapse_whitespace",
    "identity_key",
]
