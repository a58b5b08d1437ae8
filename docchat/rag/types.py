from __future__ import annotations

"""Core data types for chunks, prompts and chat turns."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Chunk:
    """Passage of extracted document text, the unit of retrieval."""
    chunk_id: str
    page_content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResult:
    """Search result with similarity score."""
    chunk: Chunk
    score: float


@dataclass(frozen=True)
class PromptPair:
    """System and user messages sent to the completion endpoint."""
    system_prompt: str
    user_prompt: str


@dataclass
class Turn:
    """One question/answer cycle of the chat loop."""
    question: str
    retrieved_chunks: list[Chunk] = field(default_factory=list)
    context: str = ""
    answer: str = ""
    error: str | None = None
