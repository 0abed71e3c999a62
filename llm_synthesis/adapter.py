"""LLM adapters for narrative generation.

Provides a base interface and concrete adapters for the Anthropic Messages
API, OpenAI-compatible APIs, and a deterministic mock for testing.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.config import LLMSettings


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Send a prompt to the LLM and return the full completion text.

        Args:
            prompt: The fully formatted prompt string.
            temperature: Sampling temperature for this call.
            max_tokens: Optional per-call completion limit.

        Returns:
            Raw string response from the model.
        """


class AnthropicLLMAdapter(BaseLLMAdapter):
    """Adapter for the Anthropic Messages API (non-streaming)."""

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        import anthropic

        client_kwargs: dict = {"api_key": api_key, "timeout": timeout_seconds}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = anthropic.Anthropic(**client_kwargs)
        self._model = model
        self._max_tokens = max_tokens

    def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        response = self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens or self._max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )


class OpenAILLMAdapter(BaseLLMAdapter):
    """Adapter for OpenAI-compatible chat completion APIs."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        max_tokens: int = 4096,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialise the OpenAI adapter.

        Args:
            model: Model identifier.
            max_tokens: Default maximum tokens in the completion.
            api_key: OpenAI API key.
            base_url: Optional base URL for OpenAI-compatible endpoints.
            timeout_seconds: Request timeout passed to the client.
        """
        from openai import OpenAI

        client_kwargs: dict = {"api_key": api_key, "timeout": timeout_seconds}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._max_tokens = max_tokens

    def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        response = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens or self._max_tokens,
            stream=False,
        )
        return response.choices[0].message.content or ""


# ---------------------------------------------------------------------------
# Fixed mock response used for local testing.
# ---------------------------------------------------------------------------
_MOCK_RESPONSE = """\
# Customer Intelligence Report

## Executive Summary

Mock report for local testing. No language model was called.
"""


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed response.

    Used for local testing and CI pipelines where no LLM API is available.
    Every prompt received is recorded on ``prompts``.
    """

    def __init__(self, response: str = _MOCK_RESPONSE) -> None:
        self._response = response
        self.prompts: list[str] = []

    def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.prompts.append(prompt)
        return self._response


def build_llm_adapter(settings: LLMSettings) -> Optional[BaseLLMAdapter]:
    """Instantiate the adapter selected by ``settings.adapter``.

    LLM_ADAPTER=mock      -> MockLLMAdapter (no API key required)
    LLM_ADAPTER=openai    -> OpenAILLMAdapter
    LLM_ADAPTER=anthropic -> AnthropicLLMAdapter (default)

    Returns None when a real provider is selected without an API key, so
    callers go straight to their canned fallbacks.
    """
    if settings.adapter == "mock":
        return MockLLMAdapter()
    if not settings.api_key:
        return None
    if settings.adapter == "openai":
        return OpenAILLMAdapter(
            model=settings.model,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
        )
    return AnthropicLLMAdapter(
        model=settings.model,
        max_tokens=settings.max_tokens,
        api_key=settings.api_key,
        base_url=settings.base_url,
    )
