"""Tests for core data models."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from pathlib import Path

import pytest

from papershelf.models import CatalogSnapshot, DocumentRecord, ThumbnailAsset

WHEN = datetime(2025, 7, 23, tzinfo=timezone.utc)


def _record(doc_id: str = "koeln") -> DocumentRecord:
    return DocumentRecord(
        id=doc_id,
        title="Koeln",
        filename="23-07-2025-Koeln.pdf",
        publish_date=WHEN,
        creation_date=WHEN,
        file_size=10,
        tags=("Koeln",),
    )


class TestDocumentRecord:
    """Test DocumentRecord dataclass."""

    def test_immutable(self) -> None:
        """Should reject attribute assignment."""
        record = _record()

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.title = "Other"  # type: ignore[misc]

    def test_equality(self) -> None:
        """Should compare records by value."""
        assert _record() == _record()
        assert _record("a") != _record("b")


class TestCatalogSnapshot:
    """Test CatalogSnapshot lookups."""

    def test_get_and_len(self) -> None:
        record = _record()
        snapshot = CatalogSnapshot(documents=(record,), built_at=1.0, by_id={"koeln": record})

        assert len(snapshot) == 1
        assert snapshot.get("koeln") is record
        assert snapshot.get("missing") is None

    def test_empty_default(self) -> None:
        snapshot = CatalogSnapshot(documents=(), built_at=0.0)

        assert len(snapshot) == 0
        assert snapshot.get("anything") is None


class TestThumbnailAsset:
    """Test ThumbnailAsset helpers."""

    def test_etag(self) -> None:
        asset = ThumbnailAsset(
            document_id="koeln", path=Path("/t/koeln.png"), size=5, last_modified=1700000000.1234
        )

        assert asset.etag == '"koeln-1700000000123"'
