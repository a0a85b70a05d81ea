"""Reconciliation, merge and cleanup defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from openpyxl.utils import column_index_from_string

from sheetrecon.domain.keys import CasePolicy

from .env import optional_env_int, optional_env_var
from .errors import ConfigurationError

DEFAULT_IDENTITY_COLUMN: Final[str] = "Expediente"
DEFAULT_MERGE_KEY_COLUMN: Final[str] = "Nº de pieza"
# Column AW, 0-based.
DEFAULT_MERGE_OFFSET: Final[int] = 48
DEFAULT_CLEANUP_COLUMNS: Final[tuple[str, str]] = ("BL", "BP")


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    identity_column: str | None = DEFAULT_IDENTITY_COLUMN
    merge_key_column: str = DEFAULT_MERGE_KEY_COLUMN
    merge_offset: int = DEFAULT_MERGE_OFFSET
    join_case: CasePolicy = CasePolicy.SENSITIVE
    cleanup_columns: tuple[str, str] = DEFAULT_CLEANUP_COLUMNS

    def __post_init__(self) -> None:
        if self.merge_offset < 0:
            raise ConfigurationError("Merge column offset must be non-negative")
        start, stop = self.cleanup_range
        if start > stop:
            raise ConfigurationError(
                f"Cleanup range {self.cleanup_columns[0]}:{self.cleanup_columns[1]} is inverted"
            )

    @property
    def cleanup_range(self) -> tuple[int, int]:
        """Return the cleanup column range as 0-based inclusive indices."""

        try:
            first, last = (column_index_from_string(letter) - 1 for letter in self.cleanup_columns)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid cleanup columns: {self.cleanup_columns}") from exc
        return first, last


def _parse_case_policy(raw: str | None) -> CasePolicy:
    if raw is None:
        return CasePolicy.SENSITIVE
    try:
        return CasePolicy(raw.lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in CasePolicy)
        raise ConfigurationError(f"SHEETRECON_JOIN_CASE must be one of: {choices}") from exc


def _parse_cleanup_columns(raw: str | None) -> tuple[str, str]:
    if raw is None:
        return DEFAULT_CLEANUP_COLUMNS
    first, sep, last = raw.partition(":")
    if not sep or not first.strip() or not last.strip():
        raise ConfigurationError(f"SHEETRECON_CLEANUP_COLUMNS must look like 'BL:BP', got {raw!r}")
    return first.strip().upper(), last.strip().upper()


def get_reconcile_config(*, identity_column: str | None = None) -> ReconcileConfig:
    """Build the reconciliation config from the environment plus explicit overrides."""

    return ReconcileConfig(
        identity_column=(
            identity_column
            or optional_env_var("SHEETRECON_IDENTITY_COLUMN")
            or DEFAULT_IDENTITY_COLUMN
        ),
        merge_key_column=optional_env_var("SHEETRECON_MERGE_KEY_COLUMN") or DEFAULT_MERGE_KEY_COLUMN,
        merge_offset=optional_env_int("SHEETRECON_MERGE_OFFSET", DEFAULT_MERGE_OFFSET),
        join_case=_parse_case_policy(optional_env_var("SHEETRECON_JOIN_CASE")),
        cleanup_columns=_parse_cleanup_columns(optional_env_var("SHEETRECON_CLEANUP_COLUMNS")),
    )
