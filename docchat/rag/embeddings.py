from __future__ import annotations

"""Embedding providers used to index and query the document."""

import hashlib
import math
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class EmbeddingError(RuntimeError):
    """Raised when embeddings fail or are invalid."""
    pass


class EmbeddingConfigError(RuntimeError):
    """Raised when embedding configuration is invalid."""
    pass


class EmbeddingProvider(Protocol):
    """Protocol for embedding providers."""
    dimension: int

    @property
    def signature(self) -> str:
        """Identify the embedding space (provider, model and dimension)."""
        raise NotImplementedError

    def embed(self, text: str) -> list[float]:
        """Return an embedding vector for the provided text."""
        raise NotImplementedError


def validate_vector(vector: list[float], dimension: int) -> list[float]:
    """Validate and normalize embedding vectors."""
    if len(vector) != dimension:
        raise EmbeddingError(
            f"Embedding dimension mismatch: expected {dimension}, got {len(vector)}"
        )
    cleaned: list[float] = []
    for value in vector:
        if not isinstance(value, (int, float)):
            raise EmbeddingError("Embedding contains a non-numeric value")
        if not math.isfinite(value):
            raise EmbeddingError("Embedding contains a non-finite value")
        cleaned.append(float(value))
    return cleaned


@dataclass
class HashEmbedder:
    """Deterministic hash-based embedder for offline use and tests."""
    dimension: int = 256

    @property
    def signature(self) -> str:
        return f"hash:{self.dimension}"

    def embed(self, text: str) -> list[float]:
        """Embed text using token hashing and L2 normalization."""
        tokens = _TOKEN_RE.findall(text.lower())
        if not tokens:
            return validate_vector([0.0] * self.dimension, self.dimension)
        vector = [0.0] * self.dimension
        for token in tokens:
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            idx = int.from_bytes(digest[:4], "big") % self.dimension
            vector[idx] += 1.0
        return validate_vector(self._l2_normalize(vector), self.dimension)

    def _l2_normalize(self, vector: list[float]) -> list[float]:
        """Normalize vector magnitude to 1.0."""
        norm = math.sqrt(sum(value * value for value in vector))
        if norm == 0.0:
            return vector
        return [value / norm for value in vector]


def resolve_openai_dimension(model: str) -> int | None:
    """Return expected dimension for OpenAI embedding model."""
    mapping = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }
    return mapping.get(model)


@dataclass
class OpenAIEmbedder:
    """Embedding provider using OpenAI embeddings API."""
    api_key: str
    model: str
    dimension: int
    client: Any = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate OpenAI configuration and create a client."""
        if not self.api_key:
            raise EmbeddingConfigError("OPENAI_API_KEY is required for OpenAI embeddings")
        if not self.model:
            raise EmbeddingConfigError("OPENAI_EMBEDDING_MODEL is required for OpenAI embeddings")
        resolved = resolve_openai_dimension(self.model)
        if self.dimension <= 0:
            if resolved is None:
                raise EmbeddingConfigError(
                    "EMBEDDING_DIMENSION must be set for OpenAI embeddings when model is unknown"
                )
            self.dimension = resolved
        elif resolved is not None and self.dimension != resolved:
            raise EmbeddingConfigError(
                f"EMBEDDING_DIMENSION should be {resolved} for model {self.model}"
            )
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise EmbeddingConfigError(
                "openai package is required for OpenAI embeddings (pip install docchat[openai])"
            ) from exc
        self.client = OpenAI(api_key=self.api_key)

    @property
    def signature(self) -> str:
        return f"openai:{self.model}:{self.dimension}"

    def embed(self, text: str) -> list[float]:
        """Embed text using the OpenAI embeddings API."""
        response = self.client.embeddings.create(model=self.model, input=text)
        vector = list(response.data[0].embedding)
        return validate_vector(vector, self.dimension)


def build_embedder(
    provider: str,
    *,
    dimension: int,
    openai_api_key: str | None,
    openai_model: str | None,
) -> HashEmbedder | OpenAIEmbedder:
    """Factory for embedding providers based on configuration."""
    normalized = provider.strip().lower()
    if normalized in {"", "hash"}:
        if dimension <= 0:
            raise EmbeddingConfigError(
                "EMBEDDING_DIMENSION must be greater than zero for hash embeddings"
            )
        return HashEmbedder(dimension=dimension)
    if normalized == "openai":
        return OpenAIEmbedder(
            api_key=openai_api_key or "",
            model=openai_model or "",
            dimension=dimension,
        )
    raise EmbeddingConfigError(
        f"Unsupported embedding provider {provider!r}; use hash or openai"
    )
