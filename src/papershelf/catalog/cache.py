"""Time-bounded in-memory catalog of the watched PDF directory."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List

from papershelf.catalog.parser import alternate_ids, parse_filename
from papershelf.errors import ScanError
from papershelf.models import CatalogSnapshot, DocumentRecord
from papershelf.utils.files import birth_time, list_pdf_files

LOGGER = logging.getLogger(__name__)

DEFAULT_TTL = 300.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogCache:
    """Owns the current :class:`CatalogSnapshot` and rebuilds it after ``ttl`` seconds.

    ``clock`` drives the freshness window and ``now`` supplies wall-clock
    timestamps for records; both are injectable for tests.
    """

    def __init__(
        self,
        directory: Path,
        *,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.directory = Path(directory)
        self.ttl = ttl
        self._clock = clock
        self._now = now
        self._snapshot: CatalogSnapshot | None = None
        self._lock = threading.Lock()
        # filename -> id handed out by the last successful rebuild
        self._assigned: Dict[str, str] = {}
        self.scan_count = 0

    def get_catalog(self) -> CatalogSnapshot:
        """Return the cached snapshot, rebuilding it once the TTL has elapsed."""
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return snapshot  # type: ignore[return-value]

        with self._lock:
            # Another thread may have rebuilt while we waited.
            snapshot = self._snapshot
            if self._is_fresh(snapshot):
                return snapshot  # type: ignore[return-value]
            try:
                snapshot = self._rebuild()
            except ScanError as exc:
                LOGGER.warning("Catalog scan failed, serving empty catalog: %s", exc)
                return CatalogSnapshot(documents=(), built_at=self._clock())
            self._snapshot = snapshot
            return snapshot

    def resolve(self, doc_id: str) -> Path | None:
        """Map ``doc_id`` to its PDF path using a freshly fetched snapshot."""
        record = self.get_catalog().get(doc_id)
        if record is None:
            return None
        return self.directory / record.filename

    def invalidate(self) -> None:
        """Drop the current snapshot so the next access rescans.

        Ids already handed out are kept, so documents do not change id.
        """
        with self._lock:
            self._snapshot = None

    def _is_fresh(self, snapshot: CatalogSnapshot | None) -> bool:
        return snapshot is not None and self._clock() - snapshot.built_at < self.ttl

    def _rebuild(self) -> CatalogSnapshot:
        try:
            paths = list_pdf_files(self.directory)
        except OSError as exc:
            raise ScanError(
                f"Unable to list {self.directory}", details=str(exc)
            ) from exc

        self.scan_count += 1
        scanned_at = self._now()
        parsed: List[DocumentRecord] = []

        for path in paths:
            try:
                stat = path.stat()
            except FileNotFoundError:
                LOGGER.debug("File vanished during scan: %s", path)
                continue
            parsed.append(
                parse_filename(
                    path.name,
                    now=scanned_at,
                    creation_date=birth_time(stat),
                    file_size=stat.st_size,
                )
            )

        records = self._assign_ids(parsed)
        self._assigned = {record.filename: record.id for record in records}
        by_id = {record.id: record for record in records}

        LOGGER.info("Catalog rebuilt: %d PDFs in %s", len(records), self.directory)
        return CatalogSnapshot(documents=tuple(records), built_at=self._clock(), by_id=by_id)

    def _assign_ids(self, parsed: List[DocumentRecord]) -> List[DocumentRecord]:
        """Give every record a unique id that stays with its file across rebuilds.

        Files keep the id they were given by an earlier rebuild. Newcomers take
        their plain id when it is free, otherwise the first free alternate
        derived from their own filename.
        """
        ids: Dict[str, str] = {}
        taken: Dict[str, str] = {}

        for record in parsed:
            previous = self._assigned.get(record.filename)
            if previous is not None and previous not in taken:
                ids[record.filename] = previous
                taken[previous] = record.filename

        for record in parsed:
            if record.filename in ids:
                continue
            candidates = (record.id,) + alternate_ids(record.filename, record.id)
            chosen = next((c for c in candidates if c not in taken), None)
            if chosen is None:
                LOGGER.warning("Skipping %s: ids %s are all in use", record.filename, candidates)
                continue
            if chosen != record.id:
                LOGGER.warning(
                    "Id collision: %s and %s both map to '%s'; using '%s' for the latter",
                    taken[record.id],
                    record.filename,
                    record.id,
                    chosen,
                )
            ids[record.filename] = chosen
            taken[chosen] = record.filename

        return [
            record if ids[record.filename] == record.id else replace(record, id=ids[record.filename])
            for record in parsed
            if record.filename in ids
        ]
