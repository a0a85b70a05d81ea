"""Workspace layout configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "SHEETRECON_DATA_DIR"
DEFAULT_CANONICAL_FILENAME: Final[str] = "concentrado-general.xlsx"
DEFAULT_DUPLICATES_FILENAME: Final[str] = "duplicados.xlsx"
DEFAULT_MERGE_DIRNAME: Final[str] = "merge-general"
DEFAULT_SECONDARY_FILENAME: Final[str] = "data.xlsx"
DEFAULT_REPORT_FILENAME: Final[str] = "reporte-merge.xlsx"


@dataclass(frozen=True, slots=True)
class WorkspaceConfig:
    """Where source spreadsheets live and where outputs are written."""

    data_dir: Path
    canonical_filename: str = DEFAULT_CANONICAL_FILENAME
    duplicates_filename: str = DEFAULT_DUPLICATES_FILENAME
    merge_dirname: str = DEFAULT_MERGE_DIRNAME
    secondary_filename: str = DEFAULT_SECONDARY_FILENAME
    report_filename: str = DEFAULT_REPORT_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def ensure_merge_dir(self) -> Path:
        merge_dir = self.merge_dir
        merge_dir.mkdir(parents=True, exist_ok=True)
        return merge_dir

    @property
    def canonical_path(self) -> Path:
        return self.resolve_data_dir() / self.canonical_filename

    @property
    def duplicates_path(self) -> Path:
        return self.resolve_data_dir() / self.duplicates_filename

    @property
    def merge_dir(self) -> Path:
        return self.resolve_data_dir() / self.merge_dirname

    @property
    def merge_primary_path(self) -> Path:
        return self.merge_dir / self.canonical_filename

    @property
    def merge_secondary_path(self) -> Path:
        return self.merge_dir / self.secondary_filename

    @property
    def report_path(self) -> Path:
        return self.merge_dir / self.report_filename

    @property
    def output_filenames(self) -> frozenset[str]:
        """File names in the data directory that are never read as sources."""

        return frozenset({self.canonical_filename, self.duplicates_filename})


def _default_data_dir() -> Path:
    return (Path.home() / "Desktop" / "concentrado-crk").expanduser().resolve()


def get_workspace_config(*, data_dir: Path | None = None) -> WorkspaceConfig:
    if data_dir is not None:
        return WorkspaceConfig(data_dir=data_dir)
    env_dir = os.getenv(DATA_DIR_ENV)
    return WorkspaceConfig(data_dir=Path(env_dir) if env_dir else _default_data_dir())
