"""Tests for PyMuPDF first-page rendering."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from papershelf.errors import ThumbnailGenerationError
from papershelf.thumbnails.renderer import PyMuPDFRenderer


class TestPyMuPDFRenderer:
    """Test PyMuPDFRenderer.render_first_page."""

    @patch("papershelf.thumbnails.renderer.fitz")
    def test_renders_first_page(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Should rasterize page zero at the configured DPI and close the document."""
        mock_pixmap = MagicMock()
        mock_pixmap.tobytes.return_value = b"png-bytes"
        mock_page = MagicMock()
        mock_page.get_pixmap.return_value = mock_pixmap

        mock_doc = MagicMock()
        mock_doc.__len__ = MagicMock(return_value=3)
        mock_doc.__getitem__ = MagicMock(return_value=mock_page)
        mock_fitz.open.return_value = mock_doc

        pdf_path = tmp_path / "test.pdf"
        pdf_path.write_bytes(b"dummy")

        result = PyMuPDFRenderer(dpi=100).render_first_page(pdf_path)

        assert result == b"png-bytes"
        mock_doc.__getitem__.assert_called_once_with(0)
        mock_page.get_pixmap.assert_called_once_with(dpi=100, alpha=False)
        mock_pixmap.tobytes.assert_called_once_with("png")
        mock_doc.close.assert_called_once()

    @patch("papershelf.thumbnails.renderer.fitz")
    @patch("papershelf.thumbnails.renderer.LOGGER")
    def test_open_error(self, mock_logger: MagicMock, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Should raise a generation error when the PDF cannot be opened."""
        mock_fitz.open.side_effect = RuntimeError("Cannot open file")

        pdf_path = tmp_path / "broken.pdf"
        pdf_path.write_bytes(b"dummy")

        with pytest.raises(ThumbnailGenerationError) as excinfo:
            PyMuPDFRenderer().render_first_page(pdf_path)

        assert "broken.pdf" in excinfo.value.details
        assert mock_logger.error.called

    @patch("papershelf.thumbnails.renderer.fitz")
    def test_empty_document(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Should reject documents without pages."""
        mock_doc = MagicMock()
        mock_doc.__len__ = MagicMock(return_value=0)
        mock_fitz.open.return_value = mock_doc

        with pytest.raises(ThumbnailGenerationError) as excinfo:
            PyMuPDFRenderer().render_first_page(tmp_path / "empty.pdf")

        assert "no pages" in excinfo.value.details
        mock_doc.close.assert_called_once()

    @patch("papershelf.thumbnails.renderer.fitz")
    def test_render_error(self, mock_fitz: MagicMock, tmp_path: Path) -> None:
        """Should wrap rasterization failures and still close the document."""
        mock_page = MagicMock()
        mock_page.get_pixmap.side_effect = RuntimeError("bad page tree")
        mock_doc = MagicMock()
        mock_doc.__len__ = MagicMock(return_value=1)
        mock_doc.__getitem__ = MagicMock(return_value=mock_page)
        mock_fitz.open.return_value = mock_doc

        with pytest.raises(ThumbnailGenerationError) as excinfo:
            PyMuPDFRenderer().render_first_page(tmp_path / "bad.pdf")

        assert "bad page tree" in excinfo.value.details
        mock_doc.close.assert_called_once()

    def test_real_pdf(self, tmp_path: Path) -> None:
        """Should render a genuine single-page PDF to PNG bytes."""
        fitz = pytest.importorskip("fitz")
        pdf_path = tmp_path / "real.pdf"
        doc = fitz.open()
        page = doc.new_page(width=595, height=842)
        page.insert_text((72, 72), "Koeln Rechtsrheinisch")
        doc.save(str(pdf_path))
        doc.close()

        data = PyMuPDFRenderer(dpi=72).render_first_page(pdf_path)

        assert data.startswith(b"\x89PNG\r\n\x1a\n")
