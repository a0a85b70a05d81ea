from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from sheetrecon.adapters import backup as backup_module
from sheetrecon.adapters.backup import BackupError, create_backup

if TYPE_CHECKING:
    from pathlib import Path


def _clock() -> datetime:
    return datetime(2024, 5, 1, 9, 30, 15, 123456)


def test_backup_is_a_byte_for_byte_copy(tmp_path: Path) -> None:
    target = tmp_path / "concentrado-general.xlsx"
    target.write_bytes(b"\x00workbook bytes\xff")

    backup = create_backup(target, clock=_clock)

    assert backup == tmp_path / "concentrado-general-backup-20240501-093015123456.xlsx"
    assert backup.read_bytes() == target.read_bytes()


def test_missing_target_needs_no_backup(tmp_path: Path) -> None:
    assert create_backup(tmp_path / "absent.xlsx", clock=_clock) is None
    assert list(tmp_path.iterdir()) == []


def test_copy_failure_raises_backup_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "data.xlsx"
    target.write_bytes(b"content")

    def failing_copy(*_: object, **__: object) -> None:
        raise PermissionError("read-only volume")

    monkeypatch.setattr(backup_module.shutil, "copyfile", failing_copy)

    with pytest.raises(BackupError, match="read-only volume"):
        create_backup(target, clock=_clock)
