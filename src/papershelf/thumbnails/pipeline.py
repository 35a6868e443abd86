"""On-demand thumbnail generation with an mtime-based disk cache.

An asset at ``<output_dir>/<doc_id>.png`` is valid while its modification
time is strictly newer than the source PDF's and its ``papershelf:source``
text chunk names that PDF. Stale or missing assets are
rendered, normalized with Pillow onto a white canvas no larger than
``width`` x ``height``, and swapped in with ``os.replace`` so readers never
see a partial file.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
import threading
import weakref
from pathlib import Path

from PIL import Image, PngImagePlugin, UnidentifiedImageError

from papershelf.errors import MissingDocumentFileError, ThumbnailGenerationError
from papershelf.models import ThumbnailAsset
from papershelf.thumbnails.renderer import PageRenderer

LOGGER = logging.getLogger(__name__)

WHITE = (255, 255, 255)
# PNG text chunk naming the PDF an asset was rendered from
SOURCE_KEY = "papershelf:source"


class ThumbnailPipeline:
    """Produce and cache first-page previews, one generation per id at a time."""

    def __init__(
        self,
        output_dir: Path,
        renderer: PageRenderer,
        *,
        width: int = 400,
        height: int = 600,
        compress_level: int = 6,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.renderer = renderer
        self.width = width
        self.height = height
        self.compress_level = compress_level
        # Entries disappear once no caller holds the lock.
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    def asset_path(self, doc_id: str) -> Path:
        return self.output_dir / f"{doc_id}.png"

    def is_fresh(self, doc_id: str, pdf_path: Path) -> bool:
        """True when the cached asset postdates ``pdf_path`` and was rendered from it.

        An asset left behind by another file under the same id is stale even
        if it is newer.
        """
        try:
            source_mtime = pdf_path.stat().st_mtime
        except FileNotFoundError as exc:
            raise MissingDocumentFileError(doc_id, pdf_path.name) from exc
        try:
            asset_mtime = self.asset_path(doc_id).stat().st_mtime
        except FileNotFoundError:
            return False
        if asset_mtime <= source_mtime:
            return False
        return self._asset_source(doc_id) == pdf_path.name

    def ensure_thumbnail(self, doc_id: str, pdf_path: Path) -> Path:
        """Return the path of an up-to-date thumbnail, generating it if needed."""
        target = self.asset_path(doc_id)
        if self.is_fresh(doc_id, pdf_path):
            LOGGER.debug("Using cached thumbnail for %s", doc_id)
            return target

        with self._lock_for(doc_id):
            # A concurrent caller may have produced it while we waited.
            if self.is_fresh(doc_id, pdf_path):
                LOGGER.debug("Thumbnail for %s generated by a concurrent request", doc_id)
                return target
            LOGGER.info("Generating thumbnail for %s", doc_id)
            self._generate(doc_id, pdf_path, target)

        LOGGER.info("Generated thumbnail: %s", target)
        return target

    def describe(self, doc_id: str) -> ThumbnailAsset:
        """Stat the stored asset for ``doc_id``."""
        path = self.asset_path(doc_id)
        try:
            stat = path.stat()
        except FileNotFoundError as exc:
            raise ThumbnailGenerationError(
                "Failed to generate PDF thumbnail", details="Thumbnail file was not created"
            ) from exc
        return ThumbnailAsset(
            document_id=doc_id, path=path, size=stat.st_size, last_modified=stat.st_mtime
        )

    def _asset_source(self, doc_id: str) -> str | None:
        try:
            with Image.open(self.asset_path(doc_id)) as image:
                return image.info.get(SOURCE_KEY)
        except OSError as exc:
            LOGGER.debug("Unreadable thumbnail for %s: %s", doc_id, exc)
            return None

    def _lock_for(self, doc_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(doc_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[doc_id] = lock
            return lock

    def _generate(self, doc_id: str, pdf_path: Path, target: Path) -> None:
        try:
            raster = self.renderer.render_first_page(pdf_path)
        except ThumbnailGenerationError:
            raise
        except Exception as exc:
            LOGGER.error("Error rendering thumbnail for %s: %s", doc_id, exc)
            raise ThumbnailGenerationError(
                "Failed to generate PDF thumbnail", details=str(exc)
            ) from exc
        try:
            image = self._normalize(raster)
        except (OSError, ValueError, UnidentifiedImageError) as exc:
            LOGGER.error("Error normalizing thumbnail for %s: %s", doc_id, exc)
            raise ThumbnailGenerationError(
                "Failed to generate PDF thumbnail", details=str(exc)
            ) from exc
        self._write_atomic(image, target, pdf_path.name)

    def _normalize(self, raster: bytes) -> Image.Image:
        with Image.open(io.BytesIO(raster)) as source:
            source.load()
            rgba = source.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, WHITE)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        # thumbnail() keeps aspect ratio and never enlarges.
        canvas.thumbnail((self.width, self.height), Image.Resampling.LANCZOS)
        return canvas

    def _write_atomic(self, image: Image.Image, target: Path, source_name: str) -> None:
        pnginfo = PngImagePlugin.PngInfo()
        pnginfo.add_text(SOURCE_KEY, source_name)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.stem}.", suffix=".png.tmp", dir=self.output_dir
            )
        except OSError as exc:
            raise ThumbnailGenerationError(
                f"Thumbnail directory {self.output_dir} is not writable", details=str(exc)
            ) from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                image.save(
                    handle, format="PNG", compress_level=self.compress_level, pnginfo=pnginfo
                )
            os.replace(tmp_path, target)
        except (OSError, ValueError) as exc:
            tmp_path.unlink(missing_ok=True)
            LOGGER.error("Error writing thumbnail %s: %s", target, exc)
            raise ThumbnailGenerationError(
                "Failed to generate PDF thumbnail", details=str(exc)
            ) from exc
