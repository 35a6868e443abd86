"""Utility helpers for working with files."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List


def list_pdf_files(directory: Path) -> List[Path]:
    """Return the PDF files directly inside ``directory``, sorted by name.

    Raises ``OSError`` when the directory cannot be listed.
    """
    return sorted(
        (
            entry
            for entry in Path(directory).iterdir()
            if entry.suffix.lower() == ".pdf" and entry.is_file()
        ),
        key=lambda entry: entry.name,
    )


def birth_time(stat: os.stat_result) -> datetime:
    """Creation time of a file, falling back to ``st_ctime`` where unsupported."""
    timestamp = getattr(stat, "st_birthtime", None)
    if timestamp is None:
        timestamp = stat.st_ctime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def file_size(path: Path) -> int | None:
    """Current size of ``path`` in bytes, or ``None`` when it does not exist."""
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return None
