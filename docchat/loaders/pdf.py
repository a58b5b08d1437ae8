from __future__ import annotations

"""PDF text extraction and cleanup."""

import re
from pathlib import Path

import fitz


class PDFLoaderError(RuntimeError):
    """Raised when PDF loading fails."""
    pass


_WHITESPACE_RE = re.compile(r"\s+")


def _clean_pdf_text(text: str) -> str:
    """Join hyphenated line breaks and collapse whitespace."""
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n")
    cleaned = re.sub(r"(\w)-\n(\w)", r"\1\2", cleaned)
    cleaned = cleaned.replace("\n", " ")
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def load_pdf_text(path: Path) -> str:
    """Extract the text of every page of a PDF on disk."""
    try:
        reader = fitz.open(str(path))
    except RuntimeError as exc:
        raise PDFLoaderError(f"Cannot open PDF {path}: {exc}") from exc
    try:
        text_parts = [page.get_text() or "" for page in reader]
    finally:
        reader.close()
    return _clean_pdf_text("\n".join(text_parts))
