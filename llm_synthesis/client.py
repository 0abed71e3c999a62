"""Failure-absorbing LLM call wrapper.

``call_llm`` never raises: a missing adapter, a provider exception or an
empty completion all come back as a failed :class:`LLMCallResult`, and the
caller decides which fallback to substitute.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from llm_synthesis.adapter import BaseLLMAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMCallResult:
    """Outcome of one completion request.

    Attributes:
        text: Completion text when the call succeeded.
        error: Human-readable failure reason otherwise.
    """

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def call_llm(
    adapter: Optional[BaseLLMAdapter],
    prompt: str,
    *,
    temperature: float = 0.0,
    max_tokens: Optional[int] = None,
    purpose: str = "completion",
) -> LLMCallResult:
    """Request one completion and report success or failure as a value.

    Args:
        adapter: Configured adapter, or None when no credential is available.
        prompt: The fully formatted prompt string.
        temperature: Sampling temperature.
        max_tokens: Optional completion limit.
        purpose: Short label used in log lines.

    Returns:
        An ``LLMCallResult``; ``ok`` is False on any failure.
    """
    if adapter is None:
        logger.info("No LLM adapter configured; skipping %s call", purpose)
        return LLMCallResult(error="LLM adapter not configured")

    try:
        text = adapter.generate(prompt, temperature=temperature, max_tokens=max_tokens)
    except Exception as exc:  # noqa: BLE001
        logger.warning("LLM %s call failed: %s", purpose, exc)
        return LLMCallResult(error=f"{type(exc).__name__}: {exc}")

    if not text or not text.strip():
        logger.warning("LLM %s call returned an empty completion", purpose)
        return LLMCallResult(error="empty completion")

    return LLMCallResult(text=text.strip())
