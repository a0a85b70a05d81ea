"""Byte-for-byte backups taken before a file is overwritten."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

log = logging.getLogger(__name__)

BACKUP_MARKER = "-backup-"
_STAMP_FORMAT = "%Y%m%d-%H%M%S%f"


class BackupError(OSError):
    """Raised when a backup copy could not be created; the overwrite must not proceed."""


def backup_path_for(path: Path, moment: datetime) -> Path:
    return path.with_name(f"{path.stem}{BACKUP_MARKER}{moment.strftime(_STAMP_FORMAT)}{path.suffix}")


def create_backup(path: Path, *, clock: Callable[[], datetime] = datetime.now) -> Path | None:
    """Copy ``path`` next to itself; return the copy, or ``None`` when there is nothing to back up."""

    if not path.exists():
        return None
    destination = backup_path_for(path, clock())
    try:
        shutil.copyfile(path, destination)
    except OSError as exc:
        raise BackupError(f"Could not back up {path} to {destination}: {exc}") from exc
    log.info(f"Backup created: {destination.name}")
    return destination


__all__ = ["BACKUP_MARKER", "BackupError", "backup_path_for", "create_backup"]
