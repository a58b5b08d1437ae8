from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping

from dotenv import load_dotenv

_ENV_NAMES = {
    "document_path": "DOCCHAT_DOCUMENT_PATH",
    "chunk_size": "DOCCHAT_CHUNK_SIZE",
    "chunk_overlap": "DOCCHAT_CHUNK_OVERLAP",
    "embedding_provider": "EMBEDDING_PROVIDER",
    "embedding_dimension": "EMBEDDING_DIMENSION",
    "openai_embedding_model": "OPENAI_EMBEDDING_MODEL",
    "llm_provider": "LLM_PROVIDER",
    "groq_api_key": "GROQ_API_KEY",
    "groq_base_url": "GROQ_BASE_URL",
    "groq_model": "GROQ_MODEL",
    "openai_api_key": "OPENAI_API_KEY",
    "openai_base_url": "OPENAI_BASE_URL",
    "openai_chat_model": "OPENAI_CHAT_MODEL",
    "ollama_base_url": "OLLAMA_BASE_URL",
    "ollama_model": "OLLAMA_MODEL",
    "llm_temperature": "LLM_TEMPERATURE",
    "llm_max_tokens": "LLM_MAX_TOKENS",
    "llm_timeout": "LLM_TIMEOUT",
    "llm_max_retries": "LLM_MAX_RETRIES",
    "llm_retry_backoff": "LLM_RETRY_BACKOFF",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    document_path: str = "./cg-internal-docs.pdf"
    chunk_size: int = 1000
    chunk_overlap: int = 100
    embedding_provider: str = "hash"
    embedding_dimension: int = 256
    openai_embedding_model: str | None = None
    llm_provider: str = "groq"
    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    openai_api_key: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_chat_model: str | None = None
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    llm_temperature: float = 0.1
    llm_max_tokens: int = 512
    llm_timeout: float = 60.0
    llm_max_retries: int = 2
    llm_retry_backoff: float = 1.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from the environment, after loading any .env file.

        Unset or blank variables keep their defaults.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values: dict[str, object] = {}
        for item in fields(cls):
            raw = environ.get(_ENV_NAMES[item.name], "").strip()
            if not raw:
                continue
            if item.default is None or isinstance(item.default, str):
                values[item.name] = raw
            elif isinstance(item.default, int):
                values[item.name] = int(raw)
            else:
                values[item.name] = float(raw)
        return cls(**values)
