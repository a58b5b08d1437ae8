from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.pop("GROQ_API_KEY", None)
os.environ.pop("OPENAI_API_KEY", None)
os.environ.setdefault("EMBEDDING_PROVIDER", "hash")

from docchat.rag.embeddings import HashEmbedder  # noqa: E402
from docchat.rag.types import Chunk  # noqa: E402
from docchat.vectorstore.inmemory import VectorIndex  # noqa: E402

CAPITALS = [
    "Paris is the capital of France.",
    "Berlin is the capital of Germany.",
    "Madrid is the capital of Spain.",
]


def make_chunks(texts: list[str]) -> list[Chunk]:
    return [
        Chunk(chunk_id=f"doc-{idx}", page_content=text, metadata={"chunk_index": idx})
        for idx, text in enumerate(texts, start=1)
    ]


@pytest.fixture
def embedder() -> HashEmbedder:
    return HashEmbedder()


@pytest.fixture
def capitals_index(embedder: HashEmbedder) -> VectorIndex:
    return VectorIndex.build(embedder, make_chunks(CAPITALS))


@pytest.fixture
def empty_index(embedder: HashEmbedder) -> VectorIndex:
    return VectorIndex.empty(embedder)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
