from __future__ import annotations

"""Prompt assembly for grounded question answering."""

from typing import Sequence

from docchat.rag.types import Chunk, PromptPair

SYSTEM_PROMPT = (
    "You are an assistant for question-answering tasks. "
    "Use the following relevant pieces of retrieved context to answer the question. "
    "If you don't know the answer, say I don't know."
)

CONTEXT_SEPARATOR = "\n\n"


def join_context(chunks: Sequence[Chunk]) -> str:
    """Join chunk text in retrieval order."""
    return CONTEXT_SEPARATOR.join(chunk.page_content for chunk in chunks)


def build_user_prompt(question: str, context: str) -> str:
    return f"Question: {question}\nRelevant context: {context}\nAnswer:"


def assemble_prompt(question: str, chunks: Sequence[Chunk]) -> PromptPair:
    """Build the system and user messages for one question."""
    return PromptPair(
        system_prompt=SYSTEM_PROMPT,
        user_prompt=build_user_prompt(question, join_context(chunks)),
    )
