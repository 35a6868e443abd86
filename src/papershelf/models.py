"""Core PaperShelf data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple


@dataclass(slots=True, frozen=True)
class DocumentRecord:
    """Catalog entry derived from a single PDF filename."""

    id: str
    title: str
    filename: str
    publish_date: datetime
    creation_date: datetime
    file_size: int = 0
    tags: Tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class CatalogSnapshot:
    """Immutable view of the watched directory at ``built_at``."""

    documents: Tuple[DocumentRecord, ...]
    built_at: float
    by_id: Mapping[str, DocumentRecord] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.documents)

    def get(self, doc_id: str) -> DocumentRecord | None:
        return self.by_id.get(doc_id)


@dataclass(slots=True)
class CatalogEntry:
    """Document record with its refreshed size and optional descriptor."""

    record: DocumentRecord
    descriptor: Dict[str, Any] | None = None
    descriptor_error: str | None = None


@dataclass(slots=True, frozen=True)
class DocumentFile:
    path: Path
    size: int
    filename: str


@dataclass(slots=True, frozen=True)
class ThumbnailAsset:
    """Rendered first-page preview stored on disk."""

    document_id: str
    path: Path
    size: int
    last_modified: float

    @property
    def etag(self) -> str:
        return f'"{self.document_id}-{int(self.last_modified * 1000)}"'
