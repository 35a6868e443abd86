"""Derive catalog records from raw PDF filenames.

E-paper issues are published as ``DD-MM-YYYY-Edition-Name.pdf``. The date
prefix becomes the publish date, the remainder becomes the display title,
and the id is a slug of the title. Parsing is pure: the same filename
always yields the same id, title and tags.
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from pathlib import PurePath

from papershelf.models import DocumentRecord
from papershelf.utils.text import normalize_whitespace, slugify, unique_words

DATE_PATTERN = re.compile(r"(\d{2})-(\d{2})-(\d{4})")
DATE_PREFIX = re.compile(r"^\d{2}-\d{2}-\d{4}-")
SEPARATORS = re.compile(r"[-_]")


def extract_publish_date(filename: str) -> datetime | None:
    """Return the first valid ``DD-MM-YYYY`` date in ``filename`` as UTC midnight."""
    for match in DATE_PATTERN.finditer(filename):
        day, month, year = (int(part) for part in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def derive_title(filename: str) -> str:
    stem = PurePath(filename).stem
    title = normalize_whitespace(SEPARATORS.sub(" ", DATE_PREFIX.sub("", stem)))
    return title or stem


def _digest(filename: str, length: int) -> str:
    return hashlib.sha1(filename.encode("utf-8")).hexdigest()[:length]


def derive_id(filename: str, title: str) -> str:
    slug = slugify(title)
    if slug:
        return slug
    return f"doc-{_digest(filename, 10)}"


def alternate_ids(filename: str, base_id: str) -> tuple[str, ...]:
    """Fallback ids for ``filename`` when ``base_id`` is already taken.

    Each one depends on the filename alone: first the publish date it
    carries (``koeln-2025-07-23``), then a short digest of the name.
    """
    alternates = []
    published = extract_publish_date(filename)
    if published is not None:
        alternates.append(f"{base_id}-{published:%Y-%m-%d}")
    alternates.append(f"{base_id}-{_digest(filename, 8)}")
    return tuple(alternates)


def parse_filename(
    filename: str,
    *,
    now: datetime | None = None,
    creation_date: datetime | None = None,
    file_size: int = 0,
) -> DocumentRecord:
    """Build a :class:`DocumentRecord` for ``filename``.

    ``now`` stands in for the publish date when the filename carries no
    usable date, and for ``creation_date`` when none is given.
    """
    now = now or datetime.now(timezone.utc)
    title = derive_title(filename)
    return DocumentRecord(
        id=derive_id(filename, title),
        title=title,
        filename=filename,
        publish_date=extract_publish_date(filename) or now,
        creation_date=creation_date or now,
        file_size=file_size,
        tags=unique_words(title.split()),
    )
