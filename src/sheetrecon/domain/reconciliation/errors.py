"""Errors raised before any reconciliation output is built."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from sheetrecon.config.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence

_IDENTITY_LIKE = re.compile(r"expediente|pieza|n[úu]mero|n[°º]|id", re.IGNORECASE)


def identity_candidates(headers: Sequence[str]) -> tuple[str, ...]:
    """Return headers that look like they could hold an identity value."""

    return tuple(header for header in headers if header and _IDENTITY_LIKE.search(header))


class MissingIdentityColumnError(ConfigurationError):
    """Raised when the designated identity column is absent from a dataset."""

    def __init__(self, column: str, *, available: Sequence[str], dataset: str = "dataset") -> None:
        self.column = column
        self.dataset = dataset
        self.available = tuple(available)
        self.candidates = identity_candidates(self.available)
        message = f"Column {column!r} not found in {dataset}. Available: {', '.join(self.available)}"
        if self.candidates:
            message += f". Possible identity columns: {', '.join(self.candidates)}"
        super().__init__(message)


class ReservedBlockConflictError(ConfigurationError):
    """Raised when the append-only column block would overwrite existing primary data."""

    def __init__(self, *, offset: int, column: int, existing: str | None) -> None:
        self.offset = offset
        self.column = column
        self.existing = existing
        super().__init__(
            f"Reserved block starting at column index {offset} overlaps existing column "
            f"{column} ({existing!r})"
        )


__all__ = ["MissingIdentityColumnError", "ReservedBlockConflictError", "identity_candidates"]
