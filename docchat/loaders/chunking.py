from __future__ import annotations

"""Text normalization and chunking utilities."""

import re

from docchat.rag.types import Chunk

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normalize whitespace and line endings in text."""
    return _WHITESPACE_RE.sub(" ", text.replace("\r\n", "\n")).strip()


def chunk_text(text: str, max_chars: int, overlap: int) -> list[str]:
    """Split text into overlapping character-based chunks."""
    cleaned = normalize_text(text)
    if not cleaned:
        return []
    if max_chars <= 0:
        return [cleaned]
    if overlap >= max_chars:
        overlap = max(0, max_chars // 4)
    overlap = max(0, overlap)

    chunks: list[str] = []
    start = 0
    length = len(cleaned)
    while start < length:
        end = min(length, start + max_chars)
        chunk = cleaned[start:end].strip()
        if chunk:
            chunks.append(chunk)
        if end >= length:
            break
        start = max(0, end - overlap)
    return chunks


def chunk_document(text: str, source: str, doc_id: str, max_chars: int, overlap: int) -> list[Chunk]:
    """Chunk document text into positional Chunk records with metadata."""
    pieces = chunk_text(text, max_chars=max_chars, overlap=overlap)
    total = len(pieces)
    return [
        Chunk(
            chunk_id=f"{doc_id}-{idx}",
            page_content=piece,
            metadata={"source": source, "chunk_index": idx, "chunk_count": total},
        )
        for idx, piece in enumerate(pieces, start=1)
    ]
