"""FastAPI application serving the PaperShelf catalog."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from papershelf.config import AppConfig
from papershelf.errors import (
    CatalogError,
    DescriptorNotFoundError,
    DocumentNotFoundError,
)
from papershelf.models import CatalogEntry, DocumentRecord
from papershelf.service import CatalogService

LOGGER = logging.getLogger(__name__)

SERVICE_NAME = "E-Paper API Server"
PDF_MAX_AGE = 86400
THUMBNAIL_MAX_AGE = 604800


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentOut(CamelModel):
    id: str
    title: str
    filename: str
    publish_date: datetime
    creation_date: datetime
    file_size: int
    tags: List[str]
    download_url: str
    thumbnail_url: str
    descriptor: Dict[str, Any] | None = None
    descriptor_error: str | None = None


class MetadataOut(CamelModel):
    id: str
    title: str
    filename: str
    publish_date: datetime
    creation_date: datetime
    file_size: int
    keywords: List[str]


class HealthOut(BaseModel):
    status: str
    timestamp: datetime
    service: str


def _error_body(code: str, message: str, details: str | None) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


def _status_for(exc: CatalogError) -> int:
    if isinstance(exc, (DocumentNotFoundError, DescriptorNotFoundError)):
        return 404
    return 500


def _etag_matches(header: str | None, etag: str) -> bool:
    """Weak comparison of an ``If-None-Match`` header against ``etag``."""
    if not header:
        return False
    if header.strip() == "*":
        return True
    for candidate in header.split(","):
        candidate = candidate.strip()
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False


def _document_out(request: Request, entry: CatalogEntry) -> DocumentOut:
    record = entry.record
    return DocumentOut(
        id=record.id,
        title=record.title,
        filename=record.filename,
        publish_date=record.publish_date,
        creation_date=record.creation_date,
        file_size=record.file_size,
        tags=list(record.tags),
        download_url=str(request.url_for("download_document", doc_id=record.id)),
        thumbnail_url=str(request.url_for("get_thumbnail", doc_id=record.id)),
        descriptor=entry.descriptor,
        descriptor_error=entry.descriptor_error,
    )


def _metadata_out(record: DocumentRecord) -> MetadataOut:
    return MetadataOut(
        id=record.id,
        title=record.title,
        filename=record.filename,
        publish_date=record.publish_date,
        creation_date=record.creation_date,
        file_size=record.file_size,
        keywords=list(record.tags),
    )


def create_app(service: CatalogService | None = None) -> FastAPI:
    """Build the API around ``service`` (defaults to one built from :class:`AppConfig`)."""
    if service is None:
        service = CatalogService.from_config(AppConfig())

    app = FastAPI(title="PaperShelf", version="0.1.0")
    app.state.service = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        status = _status_for(exc)
        if status == 404:
            LOGGER.info("%s %s: %s", request.method, request.url.path, exc.details)
        else:
            LOGGER.error("%s %s failed: %s (%s)", request.method, request.url.path, exc, exc.details)
        return JSONResponse(
            status_code=status, content=_error_body(exc.code, exc.message, exc.details)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            body = _error_body(
                "ROUTE_NOT_FOUND",
                "API endpoint not found",
                f"{request.method} {request.url.path} is not a valid endpoint",
            )
        else:
            body = _error_body("HTTP_ERROR", str(exc.detail), None)
        return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)

    @app.get("/health", response_model=HealthOut)
    async def health() -> HealthOut:
        return HealthOut(status="OK", timestamp=datetime.now(timezone.utc), service=SERVICE_NAME)

    @app.get("/api/pdfs", response_model=List[DocumentOut])
    async def list_documents(request: Request) -> List[DocumentOut]:
        entries = await asyncio.to_thread(service.list_catalog)
        LOGGER.info("Returning %d PDFs", len(entries))
        return [_document_out(request, entry) for entry in entries]

    @app.get("/api/pdfs/{doc_id}/download", name="download_document")
    async def download_document(doc_id: str) -> FileResponse:
        document = await asyncio.to_thread(service.resolve_and_stream, doc_id)
        LOGGER.info("Serving PDF: %s (%d bytes)", document.filename, document.size)
        return FileResponse(
            document.path,
            media_type="application/pdf",
            filename=document.filename,
            content_disposition_type="inline",
            headers={"Cache-Control": f"public, max-age={PDF_MAX_AGE}"},
        )

    @app.get("/api/pdfs/{doc_id}/metadata", response_model=MetadataOut)
    async def get_metadata(doc_id: str) -> MetadataOut:
        record = await asyncio.to_thread(service.get_metadata, doc_id)
        return _metadata_out(record)

    @app.get("/api/pdfs/{doc_id}/descriptor")
    async def get_descriptor(doc_id: str) -> Dict[str, Any]:
        return await asyncio.to_thread(service.get_descriptor, doc_id)

    @app.get("/api/pdfs/{doc_id}/thumbnail", name="get_thumbnail")
    async def get_thumbnail(doc_id: str, request: Request) -> Response:
        # Runs to completion in its worker thread even if the client goes away.
        asset = await asyncio.to_thread(service.get_thumbnail, doc_id)
        headers = {
            "Cache-Control": f"public, max-age={THUMBNAIL_MAX_AGE}",
            "ETag": asset.etag,
        }
        if _etag_matches(request.headers.get("if-none-match"), asset.etag):
            return Response(status_code=304, headers=headers)
        LOGGER.info("Serving PDF thumbnail for: %s (%d bytes)", doc_id, asset.size)
        return FileResponse(asset.path, media_type="image/png", headers=headers)

    return app
