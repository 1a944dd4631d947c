# src/proofline/llms/base.py

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

from proofline.observability import names
from proofline.observability.base import MetricsHook


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message sent to the model.

    Immutable. Provider-agnostic.
    """

    role: Role
    content: str


@dataclass(frozen=True)
class Usage:
    """Token usage for a completion."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass(frozen=True)
class LLMResponse:
    """Normalized LLM response.

    Provider details never leak outside the adapter.
    """

    content: str | None
    finish_reason: Literal["stop", "length", "error"]
    usage: Usage
    latency_ms: float


def record_completion(
    metrics_hook: MetricsHook, *, provider: str, model: str, response: LLMResponse
) -> None:
    """Emit the per-request latency, count and token metrics."""
    metrics_hook.record_latency(names.LLM_COMPLETION_DURATION, response.latency_ms)
    metrics_hook.increment(
        names.LLM_REQUESTS_TOTAL, labels={"provider": provider, "model": model}
    )
    metrics_hook.increment(names.LLM_TOKENS_PROMPT, response.usage.prompt_tokens)
    metrics_hook.increment(names.LLM_TOKENS_COMPLETION, response.usage.completion_tokens)
    metrics_hook.increment(names.LLM_TOKENS_TOTAL, response.usage.total_tokens)


class LLMClient(Protocol):
    """Protocol for LLM clients.

    - Stateless: every call receives the full message list
    - Transport only: retries only on network/rate-limit errors
    - No leakage: provider objects never escape the adapter
    """

    metrics_hook: MetricsHook

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Single completion.

        Args:
            messages: Complete conversation. No internal state.
            temperature: Sampling temperature (0.0 = deterministic).
            max_tokens: Maximum tokens in response.
            json_output: Ask the provider for a single JSON object reply.

        Returns:
            Normalized LLMResponse.

        Raises:
            Provider-specific errors after retry exhaustion.
        """
        ...
