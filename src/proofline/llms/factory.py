# src/proofline/llms/factory.py

import logging

from proofline.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient
from .config import LLMConfig

logger = logging.getLogger(__name__)


def create_llm_client(
    config: LLMConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> LLMClient:
    """Build the client for ``config.provider``.

    Provider SDKs are imported lazily so only the configured one has to load.

    Raises:
        ValueError: If provider is unknown.
    """
    client_class: type[LLMClient]
    if config.provider == "openai":
        from .openai import OpenAILLMClient as client_class
    elif config.provider == "anthropic":
        from .anthropic import AnthropicLLMClient as client_class
    else:
        raise ValueError(f"Unknown LLM provider: {config.provider}")

    logger.debug("Creating %s client for %s", config.provider, config.model)
    return client_class(  # type: ignore[call-arg]
        api_key=config.api_key,
        model=config.model,
        timeout=config.timeout,
        max_retries=config.max_retries,
        max_tokens=config.max_tokens,
        metrics_hook=metrics_hook,
    )
