"""Sidecar descriptor loading.

A descriptor is an optional JSON file sitting next to a PDF with the same
stem (``23-07-2025-Koeln.pdf`` -> ``23-07-2025-Koeln.json``). Its content is
passed through untouched. Descriptors are read on every call and do not
follow the catalog's freshness window.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from papershelf.catalog.cache import CatalogCache
from papershelf.errors import DescriptorLoadError, UnknownDocumentError

LOGGER = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".json"


class DescriptorLoader:
    """Resolve document ids to their sidecar descriptors."""

    def __init__(self, cache: CatalogCache, *, suffix: str = DEFAULT_SUFFIX) -> None:
        self.cache = cache
        self.suffix = suffix

    def descriptor_path(self, pdf_path: Path) -> Path:
        return pdf_path.with_name(pdf_path.stem + self.suffix)

    def load(self, doc_id: str) -> Dict[str, Any] | None:
        """Return the parsed descriptor for ``doc_id``, or ``None`` if it has none.

        Raises :class:`UnknownDocumentError` for ids outside the catalog and
        :class:`DescriptorLoadError` when a present sidecar is unreadable.
        """
        pdf_path = self.cache.resolve(doc_id)
        if pdf_path is None:
            raise UnknownDocumentError(doc_id)
        return self.load_for_path(pdf_path)

    def load_for_path(self, pdf_path: Path) -> Dict[str, Any] | None:
        path = self.descriptor_path(pdf_path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise DescriptorLoadError(
                f"Failed to read descriptor {path.name}", details=str(exc)
            ) from exc

        try:
            descriptor = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DescriptorLoadError(
                f"Failed to parse descriptor {path.name}", details=str(exc)
            ) from exc

        if not isinstance(descriptor, dict):
            raise DescriptorLoadError(
                f"Descriptor {path.name} is not a JSON object",
                details=f"Got {type(descriptor).__name__}",
            )
        LOGGER.debug("Loaded descriptor %s", path)
        return descriptor
