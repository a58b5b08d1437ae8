from __future__ import annotations

import dataclasses

import pytest

from conftest import CAPITALS, make_chunks
from docchat.vectorstore.inmemory import VectorIndex


def test_build_keeps_extraction_order(capitals_index: VectorIndex) -> None:
    assert [chunk.page_content for chunk in capitals_index.chunks] == CAPITALS
    assert len(capitals_index.vectors) == len(CAPITALS)


def test_index_is_frozen(capitals_index: VectorIndex) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        capitals_index.chunks = ()  # type: ignore[misc]


def test_equal_scores_keep_insertion_order(embedder) -> None:
    index = VectorIndex.build(embedder, make_chunks(["same text", "same text", "same text"]))

    results = index.search("same text", top_k=3)

    assert [result.chunk.chunk_id for result in results] == ["doc-1", "doc-2", "doc-3"]


def test_scores_descend(capitals_index: VectorIndex) -> None:
    results = capitals_index.search("capital of Spain", top_k=3)

    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)


def test_stats_reports_embedding(capitals_index: VectorIndex) -> None:
    stats = capitals_index.stats()

    assert stats["chunk_count"] == 3
    assert stats["embedding"] == "hash:256"
