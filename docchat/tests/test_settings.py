from __future__ import annotations

import pytest

from docchat.app.settings import Settings


def test_defaults_target_groq_and_fixed_document() -> None:
    settings = Settings.from_env({})

    assert settings.document_path == "./cg-internal-docs.pdf"
    assert settings.llm_provider == "groq"
    assert settings.groq_model == "llama-3.3-70b-versatile"
    assert settings.groq_api_key is None


def test_values_are_parsed_by_type() -> None:
    settings = Settings.from_env(
        {
            "DOCCHAT_DOCUMENT_PATH": "handbook.md",
            "DOCCHAT_CHUNK_SIZE": "500",
            "LLM_TIMEOUT": "12.5",
            "LLM_MAX_RETRIES": "0",
            "GROQ_API_KEY": "gsk-test",
        }
    )

    assert settings.document_path == "handbook.md"
    assert settings.chunk_size == 500
    assert settings.llm_timeout == 12.5
    assert settings.llm_max_retries == 0
    assert settings.groq_api_key == "gsk-test"


def test_blank_values_keep_defaults() -> None:
    settings = Settings.from_env({"DOCCHAT_CHUNK_SIZE": "  ", "GROQ_API_KEY": ""})

    assert settings.chunk_size == 1000
    assert settings.groq_api_key is None


def test_invalid_number_raises() -> None:
    with pytest.raises(ValueError):
        Settings.from_env({"DOCCHAT_CHUNK_OVERLAP": "lots"})
