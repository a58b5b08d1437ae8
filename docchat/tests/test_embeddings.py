from __future__ import annotations

import math

import pytest

from docchat.rag.embeddings import (
    EmbeddingConfigError,
    EmbeddingError,
    HashEmbedder,
    build_embedder,
    validate_vector,
)


def test_hash_embedder_is_deterministic_and_normalized() -> None:
    embedder = HashEmbedder(dimension=64)

    first = embedder.embed("Paris is the capital of France.")
    second = embedder.embed("Paris is the capital of France.")

    assert first == second
    assert len(first) == 64
    assert math.isclose(math.sqrt(sum(v * v for v in first)), 1.0)


def test_hash_embedder_blank_text_is_zero_vector() -> None:
    assert HashEmbedder(dimension=8).embed("!!!") == [0.0] * 8


def test_validate_vector_rejects_bad_dimension_and_values() -> None:
    with pytest.raises(EmbeddingError):
        validate_vector([1.0, 2.0], dimension=3)
    with pytest.raises(EmbeddingError):
        validate_vector([1.0, float("nan")], dimension=2)


def test_build_embedder_hash_default() -> None:
    embedder = build_embedder("hash", dimension=32, openai_api_key=None, openai_model=None)

    assert isinstance(embedder, HashEmbedder)
    assert embedder.signature == "hash:32"


def test_build_embedder_rejects_invalid_config() -> None:
    with pytest.raises(EmbeddingConfigError):
        build_embedder("hash", dimension=0, openai_api_key=None, openai_model=None)
    with pytest.raises(EmbeddingConfigError):
        build_embedder("openai", dimension=0, openai_api_key=None, openai_model=None)
    with pytest.raises(EmbeddingConfigError):
        build_embedder("word2vec", dimension=16, openai_api_key=None, openai_model=None)
