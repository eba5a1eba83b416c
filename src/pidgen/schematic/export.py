"""
Export sinks for finished schematic documents.

The compiler produces SVG text; what happens to it afterwards (file save,
download, upload, clipboard) is up to the caller. Any callable accepting the
document text and an optional filename hint is a valid sink.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

# Make PDF export optional using svglib + reportlab (pure Python, no Cairo needed)
try:
    from reportlab.graphics import renderPDF
    from svglib.svglib import svg2rlg
    SVGLIB_AVAILABLE = True
except ImportError:
    SVGLIB_AVAILABLE = False

from .constants import DEFAULT_FILENAME

logger = logging.getLogger(__name__)


class ExportSink(Protocol):
    """Receives a finished document and persists or forwards it."""

    def __call__(self, document: str, filename: str | None = None) -> Any: ...


@dataclass
class FileSink:
    """Write documents as UTF-8 files into a directory."""
    directory: Path = Path(".")
    encoding: str = "utf-8"

    def __call__(self, document: str, filename: str | None = None) -> Path:
        directory = Path(self.directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / (filename or DEFAULT_FILENAME)
        path.write_bytes(document.encode(self.encoding))
        logger.info("Exported SVG: %s", path)
        return path


@dataclass
class MemorySink:
    """Collect encoded documents in memory (uploads, clipboard, tests)."""
    documents: list[tuple[str, bytes]] = field(default_factory=list)

    def __call__(self, document: str, filename: str | None = None) -> bytes:
        data = document.encode("utf-8")
        self.documents.append((filename or DEFAULT_FILENAME, data))
        return data


def export_document(document: str | None, sink: ExportSink, filename: str | None = None) -> Any:
    """
    Hand a generated document to a sink.

    A None document (nothing to draw) is a no-op and returns None, so callers
    can pass the compiler result straight through.
    """
    if document is None:
        logger.info("Nothing to export: diagram has no equipment")
        return None
    return sink(document, filename)


def export_svg(document: str | None, filepath: str | Path) -> Path | None:
    """Write a document to an SVG file path."""
    filepath = Path(filepath)
    return export_document(document, FileSink(filepath.parent), filepath.name)


def export_pdf(document: str | None, filepath: str | Path) -> Path | None:
    """Export a document as PDF using svglib + reportlab."""
    if not SVGLIB_AVAILABLE:
        raise ImportError(
            "PDF export requires svglib and reportlab. "
            "Install with: pip install 'pidgen[pdf]'"
        )
    if document is None:
        logger.info("Nothing to export: diagram has no equipment")
        return None

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    # Write SVG to a temporary file for svglib to read
    with tempfile.NamedTemporaryFile(mode="w", suffix=".svg", encoding="utf-8", delete=False) as tmp:
        tmp.write(document)
        tmp_path = tmp.name

    try:
        drawing = svg2rlg(tmp_path)
        if drawing is None:
            raise ValueError("Failed to parse SVG content")
        renderPDF.drawToFile(drawing, str(filepath))
        logger.info("Exported PDF: %s", filepath)
    finally:
        os.unlink(tmp_path)

    return filepath
