from __future__ import annotations

"""Chat completion clients and their failure taxonomy."""

from dataclasses import dataclass
import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx


class CompletionError(RuntimeError):
    """Raised when a completion request fails or its response is invalid."""
    kind = "unknown"


class CompletionAuthError(CompletionError):
    """Missing or rejected credential."""
    kind = "auth"


class CompletionRateLimitError(CompletionError):
    """Rate limit or quota exceeded."""
    kind = "rate_limit"


class CompletionTransportError(CompletionError):
    """Network failure, timeout or unexpected HTTP status."""
    kind = "transport"


class CompletionMalformedError(CompletionError):
    """Response arrived but does not carry an answer."""
    kind = "malformed_response"


class CompletionConfigError(CompletionError):
    """Raised at startup when the completion provider cannot be built."""
    kind = "config"


logger = logging.getLogger(__name__)

_RETRYABLE = (CompletionTransportError, CompletionRateLimitError)


def _error_detail(response: httpx.Response) -> str:
    """Pull the provider's error message out of an error response, if any."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or ""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return response.reason_phrase or ""


def _status_error(response: httpx.Response) -> CompletionError:
    """Map an HTTP error status to the matching completion error."""
    status = response.status_code
    detail = _error_detail(response)
    suffix = f": {detail}" if detail else ""
    if status in {401, 403}:
        return CompletionAuthError(f"Authentication failed (HTTP {status}){suffix}")
    if status == 429:
        return CompletionRateLimitError(f"Rate limit exceeded (HTTP {status}){suffix}")
    return CompletionTransportError(f"Completion request failed (HTTP {status}){suffix}")


def _message_content(container: dict[str, Any], label: str) -> str:
    """Return message.content from a reply object, or raise if it is missing."""
    message = container.get("message")
    if not isinstance(message, dict):
        raise CompletionMalformedError(f"{label} has no message object")
    content = message.get("content")
    if not isinstance(content, str):
        raise CompletionMalformedError(f"{label} has no message content")
    return content


async def _post_json(
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str] | None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> dict[str, Any]:
    """POST a JSON payload under an overall deadline and decode the reply."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await asyncio.wait_for(
                client.post(url, json=payload, headers=headers),
                timeout=timeout,
            )
            response.raise_for_status()
    except asyncio.TimeoutError as exc:
        raise CompletionTransportError(f"Completion timed out after {timeout:g}s") from exc
    except httpx.HTTPStatusError as exc:
        raise _status_error(exc.response) from exc
    except httpx.HTTPError as exc:
        raise CompletionTransportError(str(exc) or type(exc).__name__) from exc
    except httpx.InvalidURL as exc:
        raise CompletionTransportError(f"Invalid completion URL: {exc}") from exc
    except UnicodeEncodeError as exc:
        # headers must be ASCII; a bad character almost always comes from the API key
        raise CompletionAuthError("API key contains characters that cannot be sent in a header") from exc
    try:
        data = response.json()
    except ValueError as exc:
        raise CompletionMalformedError("Completion response is not valid JSON") from exc
    if not isinstance(data, dict):
        raise CompletionMalformedError("Completion response is not a JSON object")
    return data


async def _with_retries(
    request: Callable[[], Awaitable[str]],
    *,
    max_retries: int,
    backoff: float,
    provider: str,
    model: str,
) -> str:
    """Run request, retrying transient failures with exponential backoff."""
    attempt = 0
    while True:
        try:
            return await request()
        except _RETRYABLE as exc:
            if attempt >= max_retries:
                raise
            delay = backoff * (2 ** attempt)
            attempt += 1
            logger.warning(
                "completion_retry",
                extra={
                    "provider": provider,
                    "model": model,
                    "attempt": attempt,
                    "kind": exc.kind,
                    "delay": delay,
                },
            )
            await asyncio.sleep(delay)


@dataclass(frozen=True)
class OpenAICompatibleCompleter:
    """Completion client for OpenAI-style chat completions (Groq, OpenAI)."""
    api_key: str | None
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    max_retries: int = 0
    retry_backoff: float = 1.0
    provider: str = "groq"
    api_key_name: str = "GROQ_API_KEY"
    transport: httpx.AsyncBaseTransport | None = None

    async def complete(self, system_prompt: str, user_prompt: str, model: str | None = None) -> str:
        """Return the assistant message for a system/user prompt pair.

        model overrides the configured model id for this call only.
        """
        model = model or self.model
        if not self.api_key:
            raise CompletionAuthError(f"{self.api_key_name} is not set")
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async def _request() -> str:
            data = await _post_json(
                f"{self.base_url}/chat/completions",
                payload,
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
            choices = data.get("choices")
            if not isinstance(choices, list) or not choices:
                raise CompletionMalformedError("Completion response has no choices")
            choice = choices[0]
            if not isinstance(choice, dict):
                raise CompletionMalformedError("Completion choice is not a JSON object")
            return _message_content(choice, "Completion response")

        return await _with_retries(
            _request,
            max_retries=self.max_retries,
            backoff=self.retry_backoff,
            provider=self.provider,
            model=model,
        )


@dataclass(frozen=True)
class OllamaCompleter:
    """Completion client backed by a local Ollama chat API."""
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    max_retries: int = 0
    retry_backoff: float = 1.0
    transport: httpx.AsyncBaseTransport | None = None

    async def complete(self, system_prompt: str, user_prompt: str, model: str | None = None) -> str:
        """Return the assistant message using Ollama."""
        model = model or self.model
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }

        async def _request() -> str:
            data = await _post_json(
                f"{self.base_url}/api/chat",
                payload,
                headers=None,
                timeout=self.timeout,
                transport=self.transport,
            )
            return _message_content(data, "Ollama response")

        return await _with_retries(
            _request,
            max_retries=self.max_retries,
            backoff=self.retry_backoff,
            provider="ollama",
            model=model,
        )


def build_completion_client(
    provider: str,
    *,
    groq_api_key: str | None,
    groq_base_url: str,
    groq_model: str,
    openai_api_key: str | None,
    openai_base_url: str,
    openai_model: str | None,
    ollama_base_url: str,
    ollama_model: str,
    temperature: float,
    max_tokens: int,
    timeout: float,
    max_retries: int,
    retry_backoff: float,
) -> OpenAICompatibleCompleter | OllamaCompleter:
    """Factory for completion clients based on provider.

    Missing API keys are not checked here; they surface as an auth failure
    on the first completion.
    """
    normalized = provider.strip().lower()
    if normalized == "groq":
        return OpenAICompatibleCompleter(
            api_key=groq_api_key,
            base_url=groq_base_url.rstrip("/"),
            model=groq_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            provider="groq",
            api_key_name="GROQ_API_KEY",
        )
    if normalized == "openai":
        if not openai_model:
            raise CompletionConfigError("OPENAI_CHAT_MODEL is required for OpenAI provider")
        return OpenAICompatibleCompleter(
            api_key=openai_api_key,
            base_url=openai_base_url.rstrip("/"),
            model=openai_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
            provider="openai",
            api_key_name="OPENAI_API_KEY",
        )
    if normalized == "ollama":
        return OllamaCompleter(
            base_url=ollama_base_url.rstrip("/"),
            model=ollama_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=max_retries,
            retry_backoff=retry_backoff,
        )
    raise CompletionConfigError(
        f"Unsupported LLM provider {provider!r}; use groq, openai or ollama"
    )
