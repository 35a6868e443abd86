"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from papershelf.catalog.cache import DEFAULT_TTL
from papershelf.catalog.descriptors import DEFAULT_SUFFIX
from papershelf.thumbnails.renderer import DEFAULT_DPI


def _env_path(name: str, default: str) -> Path:
    return Path(os.environ.get(name) or default)


def _default_port() -> int:
    try:
        return int(os.environ.get("PORT", "3000"))
    except ValueError:
        return 3000


@dataclass(slots=True)
class AppConfig:
    pdf_dir: Path | None = None
    thumbnail_dir: Path | None = None
    cache_ttl: float = DEFAULT_TTL
    thumbnail_width: int = 400
    thumbnail_height: int = 600
    thumbnail_dpi: int = DEFAULT_DPI
    png_compress_level: int = 6
    descriptor_suffix: str = DEFAULT_SUFFIX
    host: str = "127.0.0.1"
    port: int | None = None

    def __post_init__(self) -> None:
        if self.pdf_dir is None:
            self.pdf_dir = _env_path("PAPERSHELF_PDF_DIR", "pdfs")
        if self.thumbnail_dir is None:
            self.thumbnail_dir = _env_path("PAPERSHELF_THUMBNAIL_DIR", "thumbnails")
        if self.port is None:
            self.port = _default_port()

    def resolve_paths(self, base_dir: Path | None = None) -> "AppConfig":
        """Anchor relative directories at ``base_dir`` (in place)."""
        if base_dir is not None:
            if not Path(self.pdf_dir).is_absolute():
                self.pdf_dir = base_dir / self.pdf_dir
            if not Path(self.thumbnail_dir).is_absolute():
                self.thumbnail_dir = base_dir / self.thumbnail_dir
        return self
