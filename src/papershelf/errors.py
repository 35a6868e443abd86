"""Failure modes of the catalog and thumbnail core.

Each class carries a stable ``code`` so the transport layer can render an
error body without knowing the internals. Status codes are chosen by the
caller, never here.
"""

from __future__ import annotations

__all__ = [
    "CatalogError",
    "DocumentNotFoundError",
    "UnknownDocumentError",
    "MissingDocumentFileError",
    "DescriptorNotFoundError",
    "DescriptorLoadError",
    "ThumbnailGenerationError",
    "ScanError",
]


class CatalogError(RuntimeError):
    """Base exception for catalog, descriptor and thumbnail failures."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class DocumentNotFoundError(CatalogError):
    """Raised when a document cannot be served."""

    def __init__(self, doc_id: str, message: str, *, details: str | None = None) -> None:
        super().__init__(message, details=details)
        self.doc_id = doc_id


class UnknownDocumentError(DocumentNotFoundError):
    """Raised when an id is not present in the current catalog snapshot."""

    code = "PDF_NOT_FOUND"

    def __init__(self, doc_id: str) -> None:
        super().__init__(
            doc_id,
            "The requested PDF document was not found",
            details=f"No PDF with ID '{doc_id}' exists",
        )


class MissingDocumentFileError(DocumentNotFoundError):
    """Raised when an id is catalogued but its file is gone from disk."""

    code = "FILE_NOT_FOUND"

    def __init__(self, doc_id: str, filename: str) -> None:
        super().__init__(
            doc_id,
            "PDF file not found on server",
            details=f"File does not exist: {filename}",
        )
        self.filename = filename


class DescriptorNotFoundError(CatalogError):
    """Raised at the service surface when a document has no sidecar descriptor."""

    code = "DESCRIPTOR_NOT_FOUND"

    def __init__(self, doc_id: str) -> None:
        super().__init__(
            "No descriptor available for this document",
            details=f"PDF '{doc_id}' has no sidecar descriptor",
        )
        self.doc_id = doc_id


class DescriptorLoadError(CatalogError):
    """Raised when a present sidecar descriptor cannot be read or parsed."""

    code = "DESCRIPTOR_LOAD_ERROR"


class ThumbnailGenerationError(CatalogError):
    """Raised when rasterizing or normalizing a preview image fails."""

    code = "THUMBNAIL_GENERATION_ERROR"


class ScanError(CatalogError):
    """Raised when the watched directory cannot be listed."""

    code = "SCAN_ERROR"
