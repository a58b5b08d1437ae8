from __future__ import annotations

import pytest

from conftest import make_chunks
from docchat.rag.retriever import TOP_K, RetrievalError, retrieve
from docchat.rag.types import Chunk
from docchat.vectorstore.inmemory import VectorIndex


class BrokenEmbedder:
    dimension = 1
    signature = "broken:1"

    def embed(self, text: str) -> list[float]:
        raise RuntimeError("embedding service unavailable")


def test_capital_question_surfaces_matching_chunk(capitals_index: VectorIndex) -> None:
    chunks = retrieve(capitals_index, "What is the capital of France?")

    assert len(chunks) == TOP_K
    assert chunks[0].page_content == "Paris is the capital of France."


@pytest.mark.parametrize("count", [0, 1, 2, 3, 5])
@pytest.mark.parametrize("k", [1, 3, 4])
def test_returns_min_of_index_size_and_k(embedder, count: int, k: int) -> None:
    texts = [f"passage number {idx} about topic {idx}" for idx in range(count)]
    index = VectorIndex.build(embedder, make_chunks(texts))

    assert len(retrieve(index, "topic", k=k)) == min(count, k)


def test_empty_index_returns_empty_sequence(empty_index: VectorIndex) -> None:
    assert retrieve(empty_index, "hello") == []


def test_empty_index_does_not_embed_query() -> None:
    index = VectorIndex.empty(BrokenEmbedder())

    assert retrieve(index, "hello") == []


def test_embedding_failure_raises_retrieval_error() -> None:
    chunk = Chunk(chunk_id="doc-1", page_content="anything")
    index = VectorIndex(embedder=BrokenEmbedder(), chunks=(chunk,), vectors=((1.0,),))

    with pytest.raises(RetrievalError, match="embedding service unavailable"):
        retrieve(index, "hello")


def test_retrieval_does_not_mutate_index(capitals_index: VectorIndex) -> None:
    before = (capitals_index.chunks, capitals_index.vectors)

    retrieve(capitals_index, "Berlin")
    retrieve(capitals_index, "Madrid")

    assert (capitals_index.chunks, capitals_index.vectors) == before
