"""PaperShelf: file-backed e-paper catalog with cached first-page thumbnails."""

__version__ = "0.1.0"
