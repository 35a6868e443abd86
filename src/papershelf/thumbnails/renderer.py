"""First-page rasterization.

Uses PyMuPDF (fitz) to render page one of a PDF to PNG bytes. The pipeline
only depends on the :class:`PageRenderer` protocol, so tests can swap in a
stub.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import fitz  # PyMuPDF

from papershelf.errors import ThumbnailGenerationError

LOGGER = logging.getLogger(__name__)

DEFAULT_DPI = 100


class PageRenderer(Protocol):
    def render_first_page(self, path: Path) -> bytes:
        """Return the first page of ``path`` as encoded raster bytes."""
        ...


class PyMuPDFRenderer:
    """Render the first PDF page at a fixed density."""

    def __init__(self, *, dpi: int = DEFAULT_DPI) -> None:
        self.dpi = dpi

    def render_first_page(self, path: Path) -> bytes:
        try:
            doc = fitz.open(path)
        except Exception as exc:
            LOGGER.error("Failed to open PDF %s: %s", path, exc)
            raise ThumbnailGenerationError(
                "Failed to generate PDF thumbnail", details=f"Cannot open {path.name}: {exc}"
            ) from exc

        try:
            if len(doc) == 0:
                raise ThumbnailGenerationError(
                    "Failed to generate PDF thumbnail", details=f"{path.name} has no pages"
                )
            try:
                pixmap = doc[0].get_pixmap(dpi=self.dpi, alpha=False)
                return pixmap.tobytes("png")
            except Exception as exc:
                LOGGER.error("Failed to render first page of %s: %s", path, exc)
                raise ThumbnailGenerationError(
                    "Failed to generate PDF thumbnail", details=str(exc)
                ) from exc
        finally:
            doc.close()
