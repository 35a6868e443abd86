"""Command line interface for PaperShelf."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from papershelf.config import AppConfig
from papershelf.errors import CatalogError
from papershelf.service import CatalogService
from papershelf.utils.files import file_size
from papershelf.web.app import create_app


console = Console()
app = typer.Typer(help="PaperShelf - e-paper PDF catalog and thumbnail server")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(pdf_dir: Optional[Path], thumbnail_dir: Optional[Path]) -> AppConfig:
    config = AppConfig(pdf_dir=pdf_dir, thumbnail_dir=thumbnail_dir)
    return config.resolve_paths(Path.cwd())


@app.command("list")
def list_documents(
    pdf_dir: Optional[Path] = typer.Option(None, "--pdf-dir", help="Directory holding the PDF files"),
    thumbnail_dir: Optional[Path] = typer.Option(
        None, "--thumbnail-dir", help="Directory for generated thumbnails"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show the catalog and whether each file is present on disk."""
    _setup_logging(verbose)
    config = _build_config(pdf_dir, thumbnail_dir)
    service = CatalogService.from_config(config)

    entries = service.list_catalog()
    if not entries:
        console.print(f"[yellow]No PDFs found in {config.pdf_dir}.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Id", no_wrap=True)
    table.add_column("Title")
    table.add_column("Published")
    table.add_column("Size", justify="right")
    table.add_column("File")

    for entry in entries:
        record = entry.record
        present = file_size(Path(config.pdf_dir) / record.filename) is not None
        marker = "[green]ok[/green]" if present else "[red]FILE NOT FOUND[/red]"
        table.add_row(
            record.id,
            record.title,
            record.publish_date.date().isoformat(),
            str(record.file_size),
            f"{record.filename} {marker}",
        )

    console.print(table)
    console.print(f"Available PDFs: {len(entries)}")


@app.command()
def metadata(
    doc_id: str = typer.Argument(..., help="Document id"),
    pdf_dir: Optional[Path] = typer.Option(None, "--pdf-dir", help="Directory holding the PDF files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print a document's metadata as JSON."""
    _setup_logging(verbose)
    service = CatalogService.from_config(_build_config(pdf_dir, None))
    try:
        record = service.get_metadata(doc_id)
    except CatalogError as exc:
        console.print(f"[red]{exc.message}[/red] ({exc.details})")
        raise typer.Exit(code=1)

    payload = {
        "id": record.id,
        "title": record.title,
        "filename": record.filename,
        "publishDate": record.publish_date.isoformat(),
        "creationDate": record.creation_date.isoformat(),
        "fileSize": record.file_size,
        "keywords": list(record.tags),
    }
    console.print_json(json.dumps(payload))


@app.command()
def thumbnail(
    doc_id: str = typer.Argument(..., help="Document id"),
    pdf_dir: Optional[Path] = typer.Option(None, "--pdf-dir", help="Directory holding the PDF files"),
    thumbnail_dir: Optional[Path] = typer.Option(
        None, "--thumbnail-dir", help="Directory for generated thumbnails"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Generate (or reuse) the first-page thumbnail of a document."""
    _setup_logging(verbose)
    service = CatalogService.from_config(_build_config(pdf_dir, thumbnail_dir))
    try:
        asset = service.get_thumbnail(doc_id)
    except CatalogError as exc:
        console.print(f"[red]{exc.message}[/red] ({exc.details})")
        raise typer.Exit(code=1)
    console.print(f"{asset.path} ({asset.size} bytes)")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: Optional[int] = typer.Option(None, help="Server port (defaults to $PORT or 3000)"),
    pdf_dir: Optional[Path] = typer.Option(None, "--pdf-dir", help="Directory holding the PDF files"),
    thumbnail_dir: Optional[Path] = typer.Option(
        None, "--thumbnail-dir", help="Directory for generated thumbnails"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Start the HTTP API."""
    _setup_logging(verbose)
    config = _build_config(pdf_dir, thumbnail_dir)
    config.host = host
    if port is not None:
        config.port = port

    if not Path(config.pdf_dir).is_dir():
        console.print(f"[yellow]Warning: PDF directory {config.pdf_dir} does not exist.[/yellow]")

    console.print(f"Starting E-Paper API on http://{config.host}:{config.port}")
    console.print(f"PDF directory: {config.pdf_dir}")
    uvicorn.run(
        create_app(CatalogService.from_config(config)),
        host=config.host,
        port=config.port,
        reload=False,
        log_level="debug" if verbose else "info",
    )


if __name__ == "__main__":  # pragma: no cover
    app()
