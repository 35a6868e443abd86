"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from papershelf.config import AppConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PAPERSHELF_PDF_DIR", "PAPERSHELF_THUMBNAIL_DIR", "PORT"):
        monkeypatch.delenv(name, raising=False)


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.pdf_dir == Path("pdfs")
        assert config.thumbnail_dir == Path("thumbnails")
        assert config.cache_ttl == 300.0
        assert (config.thumbnail_width, config.thumbnail_height) == (400, 600)
        assert config.thumbnail_dpi == 100
        assert config.descriptor_suffix == ".json"
        assert config.port == 3000

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should read directories and port from the environment."""
        monkeypatch.setenv("PAPERSHELF_PDF_DIR", "/srv/epaper")
        monkeypatch.setenv("PAPERSHELF_THUMBNAIL_DIR", "/var/cache/thumbs")
        monkeypatch.setenv("PORT", "8080")

        config = AppConfig()

        assert config.pdf_dir == Path("/srv/epaper")
        assert config.thumbnail_dir == Path("/var/cache/thumbs")
        assert config.port == 8080

    def test_bad_port_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should ignore a non-numeric PORT."""
        monkeypatch.setenv("PORT", "http")

        assert AppConfig().port == 3000

    def test_explicit_values_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should prefer constructor arguments over the environment."""
        monkeypatch.setenv("PAPERSHELF_PDF_DIR", "/srv/epaper")

        config = AppConfig(pdf_dir=Path("/custom"), port=9000)

        assert config.pdf_dir == Path("/custom")
        assert config.port == 9000

    def test_resolve_paths_relative(self) -> None:
        """Should anchor relative directories at base_dir."""
        config = AppConfig().resolve_paths(Path("/project"))

        assert config.pdf_dir == Path("/project/pdfs")
        assert config.thumbnail_dir == Path("/project/thumbnails")

    def test_resolve_paths_absolute(self) -> None:
        """Should leave absolute directories untouched."""
        config = AppConfig(pdf_dir=Path("/a"), thumbnail_dir=Path("/b")).resolve_paths(Path("/x"))

        assert config.pdf_dir == Path("/a")
        assert config.thumbnail_dir == Path("/b")

    def test_resolve_paths_no_base(self) -> None:
        """Should keep relative paths when no base_dir is given."""
        assert AppConfig().resolve_paths().pdf_dir == Path("pdfs")
