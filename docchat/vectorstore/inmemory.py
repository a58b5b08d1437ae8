from __future__ import annotations

"""Immutable in-memory vector index with cosine similarity search."""

import math
from dataclasses import dataclass
from typing import Iterable

from docchat.rag.embeddings import EmbeddingProvider
from docchat.rag.types import Chunk, SearchResult


@dataclass(frozen=True)
class VectorIndex:
    """Chunks and their embeddings, fixed once built.

    The index keeps the embedder that produced its vectors so queries are
    always embedded in the same space as the stored chunks.
    """
    embedder: EmbeddingProvider
    chunks: tuple[Chunk, ...] = ()
    vectors: tuple[tuple[float, ...], ...] = ()

    @classmethod
    def build(cls, embedder: EmbeddingProvider, chunks: Iterable[Chunk]) -> VectorIndex:
        """Embed every chunk in extraction order and freeze the result."""
        stored: list[Chunk] = []
        vectors: list[tuple[float, ...]] = []
        for chunk in chunks:
            vectors.append(tuple(embedder.embed(chunk.page_content)))
            stored.append(chunk)
        return cls(embedder=embedder, chunks=tuple(stored), vectors=tuple(vectors))

    @classmethod
    def empty(cls, embedder: EmbeddingProvider) -> VectorIndex:
        return cls(embedder=embedder)

    def __len__(self) -> int:
        return len(self.chunks)

    def search(self, query: str, top_k: int = 3) -> list[SearchResult]:
        """Return the top_k chunks by descending similarity to the query."""
        if not self.chunks or top_k <= 0:
            return []
        query_vector = self.embedder.embed(query)
        scored = [
            SearchResult(chunk=chunk, score=self._cosine_similarity(query_vector, vec))
            for chunk, vec in zip(self.chunks, self.vectors)
        ]
        # sort is stable: equal scores keep insertion order
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[:top_k]

    def _cosine_similarity(self, a: list[float] | tuple[float, ...], b: tuple[float, ...]) -> float:
        """Compute cosine similarity between two vectors."""
        dot = sum(x * y for x, y in zip(a, b))
        norm_a = math.sqrt(sum(x * x for x in a))
        norm_b = math.sqrt(sum(y * y for y in b))
        if norm_a == 0.0 or norm_b == 0.0:
            return 0.0
        return dot / (norm_a * norm_b)

    def stats(self) -> dict[str, int | str]:
        """Return basic stats for the index."""
        return {
            "backend": "memory",
            "chunk_count": len(self.chunks),
            "embedding": self.embedder.signature,
        }
