from __future__ import annotations

from typing import TYPE_CHECKING

from sheetrecon.adapters.filesystem import discover_sources

if TYPE_CHECKING:
    from pathlib import Path


def test_discovery_skips_lock_hidden_backup_and_output_files(tmp_path: Path) -> None:
    for name in (
        "b-zona.xlsx",
        "a-zona.xlsx",
        "~$a-zona.xlsx",
        "$temp.xlsx",
        ".concentrado-general-k2j4.xlsx",
        "concentrado-general.xlsx",
        "duplicados.xlsx",
        "concentrado-general-backup-20240101-000000000000.xlsx",
        "notas.csv",
    ):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "carpeta.xlsx").mkdir()

    sources = discover_sources(
        tmp_path, exclude={"concentrado-general.xlsx", "duplicados.xlsx"}
    )

    assert [path.name for path in sources] == ["a-zona.xlsx", "b-zona.xlsx"]


def test_missing_directory_has_no_sources(tmp_path: Path) -> None:
    assert discover_sources(tmp_path / "absent") == []
