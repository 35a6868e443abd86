"""Shared fixtures for PaperShelf tests."""

from __future__ import annotations

import io
import os
import time
from pathlib import Path
from typing import List

import pytest
from PIL import Image


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class StubRenderer:
    """Renderer returning a fixed PNG and recording every call."""

    def __init__(self, size: tuple[int, int] = (827, 1169), mode: str = "RGB") -> None:
        self.size = size
        self.mode = mode
        self.calls: List[Path] = []
        self.error: Exception | None = None

    def render_first_page(self, path: Path) -> bytes:
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return make_png(self.size, mode=self.mode)


def make_png(size: tuple[int, int], *, mode: str = "RGB") -> bytes:
    color = (10, 20, 30, 0) if mode == "RGBA" else (10, 20, 30)
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def write_pdf(directory: Path, name: str, content: bytes = b"%PDF-1.4 dummy", *, age: float = 3600.0) -> Path:
    """Create a fake PDF whose mtime lies ``age`` seconds in the past."""
    path = directory / name
    path.write_bytes(content)
    past = time.time() - age
    os.utime(path, (past, past))
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture
def pdf_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "pdfs"
    directory.mkdir()
    return directory


@pytest.fixture
def thumbnail_dir(tmp_path: Path) -> Path:
    return tmp_path / "thumbnails"
