from __future__ import annotations

"""Build the in-memory index from the source document at startup."""

import logging
import os
from pathlib import Path
from typing import Callable

from docchat.loaders.chunking import chunk_document
from docchat.loaders.pdf import PDFLoaderError, load_pdf_text
from docchat.loaders.text import load_text_file
from docchat.rag.embeddings import EmbeddingProvider
from docchat.vectorstore.inmemory import VectorIndex

logger = logging.getLogger(__name__)

_TEXT_SUFFIXES = {".txt", ".md", ".markdown"}


class DocumentNotFoundError(RuntimeError):
    """Raised when the document path is not a readable file."""
    pass


class IndexingError(RuntimeError):
    """Raised when a present document cannot be parsed or embedded."""
    pass


def load_document_text(path: Path) -> str:
    """Extract raw text from a supported document type."""
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        try:
            return load_pdf_text(path)
        except PDFLoaderError as exc:
            raise IndexingError(str(exc)) from exc
    if suffix in _TEXT_SUFFIXES:
        return load_text_file(path)
    raise IndexingError(f"Unsupported document type: {suffix or path.name}")


def build_index(
    document_path: str | Path,
    embedder: EmbeddingProvider,
    *,
    chunk_size: int,
    chunk_overlap: int,
) -> VectorIndex:
    """Parse, chunk and embed the whole document into a fresh index."""
    path = Path(document_path)
    if not path.is_file() or not os.access(path, os.R_OK):
        raise DocumentNotFoundError(f"Document not found or unreadable: {path}")
    try:
        text = load_document_text(path)
    except OSError as exc:
        raise DocumentNotFoundError(f"Cannot read document {path}: {exc}") from exc
    chunks = chunk_document(
        text,
        source=str(path),
        doc_id=path.stem,
        max_chars=chunk_size,
        overlap=chunk_overlap,
    )
    if not chunks:
        raise IndexingError(f"No extractable text in {path}")
    try:
        index = VectorIndex.build(embedder, chunks)
    except Exception as exc:
        raise IndexingError(f"Embedding failed for {path}: {exc}") from exc
    logger.info("index_built", extra={"source": str(path), **index.stats()})
    return index


def bootstrap_index(
    document_path: str | Path,
    embedder: EmbeddingProvider,
    *,
    chunk_size: int,
    chunk_overlap: int,
    write: Callable[[str], None] = print,
) -> VectorIndex:
    """Index the document, falling back to an empty index on failure."""
    write(f"📄 Indexing document {document_path}...")
    try:
        index = build_index(
            document_path,
            embedder,
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )
    except DocumentNotFoundError as exc:
        logger.warning("document_missing", extra={"detail": str(exc)})
        write(f"⚠️ Note: Make sure the document exists at {document_path}\n")
        return VectorIndex.empty(embedder)
    except IndexingError as exc:
        logger.warning("indexing_failed", extra={"detail": str(exc)})
        write(f"⚠️ Could not index {document_path}: {exc}\n")
        return VectorIndex.empty(embedder)
    write(f"✅ Document indexed successfully! ({len(index)} chunks)\n")
    return index
