"""Locate source workbooks inside the data directory."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .backup import BACKUP_MARKER

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path

SOURCE_PATTERN = "*.xlsx"
_TEMPORARY = re.compile(r"^[~$.]")


def discover_sources(directory: Path, *, exclude: Collection[str] = ()) -> list[Path]:
    """Return source workbooks in ``directory`` sorted by file name.

    Office lock files (``~$...``), hidden files, backups and any name in ``exclude``
    are skipped.
    """

    if not directory.is_dir():
        return []
    return sorted(
        (
            path
            for path in directory.glob(SOURCE_PATTERN)
            if path.is_file()
            and not _TEMPORARY.match(path.name)
            and BACKUP_MARKER not in path.stem
            and path.name not in exclude
        ),
        key=lambda path: path.name,
    )


__all__ = ["SOURCE_PATTERN", "discover_sources"]
