# src/proofline/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "anthropic"]

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-2024-08-06",
    "anthropic": "claude-sonnet-4-20250514",
}

# A verdict is a short JSON object; this bounds a runaway reply.
DEFAULT_MAX_TOKENS = 512


@dataclass(frozen=True)
class LLMConfig:
    """Which provider and model answer sentence checks.

    Immutable. A missing ``api_key`` falls back to the provider SDK's own
    environment variable.
    """

    provider: Provider
    model: str
    api_key: str | None = None
    timeout: float = 30.0
    max_retries: int = 3
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def for_provider(
        cls, provider: Provider, model: str | None = None, **options: object
    ) -> "LLMConfig":
        """Build a config, picking the provider's default model when none is given.

        Raises:
            ValueError: If provider is unknown.
        """
        if provider not in DEFAULT_MODELS:
            raise ValueError(f"Unknown LLM provider: {provider}")
        return cls(provider=provider, model=model or DEFAULT_MODELS[provider], **options)  # type: ignore[arg-type]
