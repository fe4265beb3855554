"""PDF text extraction."""

from __future__ import annotations

from pathlib import Path

import fitz

from course_mentor.core.errors import NoExtractableTextError
from course_mentor.ingest.types import ExtractedText
from course_mentor.utils.text import normalize


def extract_pdf_text(path: Path) -> ExtractedText:
    """Read every page of ``path`` with PyMuPDF and join the page texts."""
    if not path.is_file():
        raise FileNotFoundError(path)
    raw = path.read_bytes()
    try:
        with fitz.open(stream=raw, filetype="pdf") as doc:
            pages = [page.get_text("text", sort=True) for page in doc]
            title = (doc.metadata or {}).get("title") or path.stem
    except RuntimeError as exc:
        # PyMuPDF raises RuntimeError subclasses for damaged or non-PDF input.
        raise NoExtractableTextError(str(path)) from exc
    text = normalize("\n\n".join(pages))
    return ExtractedText(
        path=path,
        text=text,
        page_count=len(pages),
        metadata={"path": str(path), "title": title, "size_bytes": len(raw)},
    )


__all__ = ["extract_pdf_text"]
