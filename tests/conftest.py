from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sheetrecon.config import ReconcileConfig, WorkspaceConfig

if TYPE_CHECKING:
    from pathlib import Path

_ENV_VARS = (
    "SHEETRECON_DATA_DIR",
    "SHEETRECON_IDENTITY_COLUMN",
    "SHEETRECON_MERGE_KEY_COLUMN",
    "SHEETRECON_MERGE_OFFSET",
    "SHEETRECON_JOIN_CASE",
    "SHEETRECON_CLEANUP_COLUMNS",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceConfig:
    return WorkspaceConfig(data_dir=tmp_path / "data")


@pytest.fixture
def settings() -> ReconcileConfig:
    return ReconcileConfig(identity_column="Expediente", merge_key_column="Pieza", merge_offset=4)
