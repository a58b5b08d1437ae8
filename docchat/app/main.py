from __future__ import annotations

"""Console entrypoint for the document chat assistant."""

import logging
from typing import Callable

from docchat.app.session import ChatSession, run_session
from docchat.app.settings import Settings
from docchat.rag.embeddings import EmbeddingConfigError, build_embedder
from docchat.rag.indexer import bootstrap_index
from docchat.rag.llm import CompletionConfigError, build_completion_client

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    """Configure root logging using environment settings."""
    level = getattr(logging, level_name.strip().upper(), logging.WARNING)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


def build_session(settings: Settings, write: Callable[[str], None] = print) -> ChatSession:
    """Wire embedder, completion client and index into one session."""
    embedder = build_embedder(
        settings.embedding_provider,
        dimension=settings.embedding_dimension,
        openai_api_key=settings.openai_api_key,
        openai_model=settings.openai_embedding_model,
    )
    completer = build_completion_client(
        settings.llm_provider,
        groq_api_key=settings.groq_api_key,
        groq_base_url=settings.groq_base_url,
        groq_model=settings.groq_model,
        openai_api_key=settings.openai_api_key,
        openai_base_url=settings.openai_base_url,
        openai_model=settings.openai_chat_model,
        ollama_base_url=settings.ollama_base_url,
        ollama_model=settings.ollama_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
        max_retries=settings.llm_max_retries,
        retry_backoff=settings.llm_retry_backoff,
    )
    index = bootstrap_index(
        settings.document_path,
        embedder,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        write=write,
    )
    return ChatSession(settings=settings, index=index, completer=completer)


def main() -> int:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 1
    _configure_logging(settings.log_level)
    try:
        session = build_session(settings)
    except (EmbeddingConfigError, CompletionConfigError) as exc:
        logger.error("startup_failed", extra={"detail": str(exc)})
        print(f"Configuration error: {exc}")
        return 1
    try:
        run_session(session, read_line=input, write=print)
    except KeyboardInterrupt:
        print()
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
