"""Catalog service: the operations the transport layer calls into."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

from papershelf.catalog.cache import CatalogCache
from papershelf.catalog.descriptors import DescriptorLoader
from papershelf.config import AppConfig
from papershelf.errors import (
    DescriptorLoadError,
    DescriptorNotFoundError,
    MissingDocumentFileError,
    UnknownDocumentError,
)
from papershelf.models import CatalogEntry, DocumentFile, DocumentRecord, ThumbnailAsset
from papershelf.thumbnails.pipeline import ThumbnailPipeline
from papershelf.thumbnails.renderer import PyMuPDFRenderer
from papershelf.utils.files import file_size

LOGGER = logging.getLogger(__name__)


class CatalogService:
    """High-level API over the catalog cache, descriptors and thumbnails.

    Every not-found path raises either :class:`UnknownDocumentError` (id
    outside the snapshot) or :class:`MissingDocumentFileError` (catalogued
    but gone from disk).
    """

    def __init__(
        self,
        cache: CatalogCache,
        descriptors: DescriptorLoader,
        thumbnails: ThumbnailPipeline,
    ) -> None:
        self.cache = cache
        self.descriptors = descriptors
        self.thumbnails = thumbnails

    @classmethod
    def from_config(cls, config: AppConfig) -> "CatalogService":
        cache = CatalogCache(Path(config.pdf_dir), ttl=config.cache_ttl)
        descriptors = DescriptorLoader(cache, suffix=config.descriptor_suffix)
        thumbnails = ThumbnailPipeline(
            Path(config.thumbnail_dir),
            PyMuPDFRenderer(dpi=config.thumbnail_dpi),
            width=config.thumbnail_width,
            height=config.thumbnail_height,
            compress_level=config.png_compress_level,
        )
        return cls(cache, descriptors, thumbnails)

    def list_catalog(self) -> List[CatalogEntry]:
        """Return every catalogued document with current sizes and descriptors."""
        entries: List[CatalogEntry] = []
        for record in self.cache.get_catalog().documents:
            path = self.cache.directory / record.filename
            size = file_size(path)
            if size is not None:
                record = replace(record, file_size=size)
            entry = CatalogEntry(record=record)
            try:
                entry.descriptor = self.descriptors.load_for_path(path)
            except DescriptorLoadError as exc:
                LOGGER.warning("Descriptor for %s unavailable: %s", record.id, exc)
                entry.descriptor_error = exc.message
            entries.append(entry)
        return entries

    def resolve_and_stream(self, doc_id: str) -> DocumentFile:
        """Locate the PDF behind ``doc_id`` and report its current size."""
        record, path = self._lookup(doc_id)
        size = file_size(path)
        if size is None:
            raise MissingDocumentFileError(doc_id, record.filename)
        return DocumentFile(path=path, size=size, filename=record.filename)

    def get_metadata(self, doc_id: str) -> DocumentRecord:
        record, path = self._lookup(doc_id)
        size = file_size(path)
        if size is None:
            raise MissingDocumentFileError(doc_id, record.filename)
        return replace(record, file_size=size)

    def get_descriptor(self, doc_id: str) -> Dict[str, Any]:
        record, path = self._lookup(doc_id)
        if not path.is_file():
            raise MissingDocumentFileError(doc_id, record.filename)
        descriptor = self.descriptors.load(doc_id)
        if descriptor is None:
            raise DescriptorNotFoundError(doc_id)
        return descriptor

    def get_thumbnail(self, doc_id: str) -> ThumbnailAsset:
        """Return an up-to-date preview for ``doc_id``, rendering it if stale."""
        record, path = self._lookup(doc_id)
        if not path.is_file():
            raise MissingDocumentFileError(doc_id, record.filename)
        self.thumbnails.ensure_thumbnail(doc_id, path)
        return self.thumbnails.describe(doc_id)

    def _lookup(self, doc_id: str) -> tuple[DocumentRecord, Path]:
        record = self.cache.get_catalog().get(doc_id)
        if record is None:
            raise UnknownDocumentError(doc_id)
        return record, self.cache.directory / record.filename
