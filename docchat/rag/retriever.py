from __future__ import annotations

"""Top-k passage retrieval over the document index."""

import logging

from docchat.rag.types import Chunk
from docchat.vectorstore.inmemory import VectorIndex

TOP_K = 3

logger = logging.getLogger(__name__)


class RetrievalError(RuntimeError):
    """Raised when a query cannot be matched against the index."""
    pass


def retrieve(index: VectorIndex, query: str, k: int = TOP_K) -> list[Chunk]:
    """Return up to k chunks, best match first."""
    try:
        results = index.search(query, top_k=k)
    except Exception as exc:
        raise RetrievalError(f"Retrieval failed: {exc}") from exc
    logger.info(
        "retrieval_complete",
        extra={
            "results": len(results),
            "query_length": len(query),
        },
    )
    return [result.chunk for result in results]
