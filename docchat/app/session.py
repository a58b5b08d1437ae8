from __future__ import annotations

"""Interactive question/answer loop over the indexed document."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from docchat.app.settings import Settings
from docchat.rag.llm import CompletionError
from docchat.rag.prompts import assemble_prompt, join_context
from docchat.rag.retriever import TOP_K, RetrievalError, retrieve
from docchat.rag.types import Turn
from docchat.vectorstore.inmemory import VectorIndex

EXIT_COMMAND = "/bye"
USER_PROMPT = "You: "

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    AWAITING_INPUT = "awaiting_input"
    RETRIEVING = "retrieving"
    ASSEMBLING = "assembling"
    AWAITING_COMPLETION = "awaiting_completion"
    DISPLAYING = "displaying"
    CLOSED = "closed"


class CompletionClient(Protocol):
    async def complete(self, system_prompt: str, user_prompt: str, model: str | None = None) -> str:
        ...


@dataclass(frozen=True)
class ChatSession:
    """Collaborators shared by every turn, built once at startup."""
    settings: Settings
    index: VectorIndex
    completer: CompletionClient
    top_k: int = TOP_K


def is_exit_command(line: str) -> bool:
    return line == EXIT_COMMAND


def _enter(state: SessionState) -> SessionState:
    logger.debug("session_state", extra={"state": state.value})
    return state


async def run_turn(session: ChatSession, question: str) -> Turn:
    """Answer one question. Turn-level failures are recorded, not raised."""
    turn = Turn(question=question)
    try:
        _enter(SessionState.RETRIEVING)
        turn.retrieved_chunks = retrieve(session.index, question, k=session.top_k)
        _enter(SessionState.ASSEMBLING)
        turn.context = join_context(turn.retrieved_chunks)
        prompt = assemble_prompt(question, turn.retrieved_chunks)
        _enter(SessionState.AWAITING_COMPLETION)
        answer = await session.completer.complete(prompt.system_prompt, prompt.user_prompt)
    except RetrievalError as exc:
        logger.error("retrieval_failed", extra={"detail": str(exc)})
        turn.error = str(exc)
        return turn
    except CompletionError as exc:
        logger.error("completion_failed", extra={"kind": exc.kind, "detail": str(exc)})
        turn.error = str(exc)
        return turn
    turn.answer = answer.strip()
    return turn


def format_turn(turn: Turn) -> str:
    if turn.error is not None:
        return f"Assistant: [error] {turn.error}"
    return f"Assistant: {turn.answer}"


def run_session(
    session: ChatSession,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> SessionState:
    """Read questions until the exit command or end of input.

    Input is read on the calling thread so Ctrl-C interrupts it directly;
    only the turn itself runs on the event loop.
    """
    with asyncio.Runner() as runner:
        while True:
            _enter(SessionState.AWAITING_INPUT)
            try:
                question = read_line(USER_PROMPT)
            except EOFError:
                write("")
                break
            if is_exit_command(question):
                break
            turn = runner.run(run_turn(session, question))
            _enter(SessionState.DISPLAYING)
            write(format_turn(turn))
    logger.info("session_closed")
    return _enter(SessionState.CLOSED)
