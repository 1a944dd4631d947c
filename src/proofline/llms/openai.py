# src/proofline/llms/openai.py

import logging
from time import monotonic
from typing import Any, Literal

from openai import NOT_GIVEN, AsyncOpenAI, OpenAIError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from proofline.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient, LLMResponse, Message, Usage, record_completion
from .config import DEFAULT_MAX_TOKENS, DEFAULT_MODELS

logger = logging.getLogger(__name__)

JSON_OBJECT_FORMAT = {"type": "json_object"}

_FINISH_REASONS: dict[str, Literal["stop", "length"]] = {
    "stop": "stop",
    "length": "length",
}


class OpenAILLMClient(LLMClient):
    """OpenAI chat completions client.

    Stateless. Retries only transport and rate-limit failures. JSON mode
    maps to ``response_format={"type": "json_object"}``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODELS["openai"],
        timeout: float = 30.0,
        max_retries: int = 3,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self._max_tokens = max_tokens
        self.metrics_hook = metrics_hook
        logger.info("OpenAI client ready: model=%s, timeout=%s", model, timeout)

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
        json_output: bool = False,
    ) -> LLMResponse:
        start = monotonic()
        logger.debug(
            "Calling OpenAI: model=%s, messages=%d, json=%s",
            self._model,
            len(messages),
            json_output,
        )

        raw = await self._call_api(
            messages=[{"role": m.role.value, "content": m.content} for m in messages],
            temperature=temperature,
            max_tokens=max_tokens or self._max_tokens,
            response_format=JSON_OBJECT_FORMAT if json_output else None,
        )
        response = self._normalize_response(raw, 1000 * (monotonic() - start))

        record_completion(
            self.metrics_hook, provider="openai", model=self._model, response=response
        )
        logger.info(
            "OpenAI completion: finish=%s, tokens=%d, latency=%.0fms",
            response.finish_reason,
            response.usage.total_tokens,
            response.latency_ms,
        )
        return response

    async def _call_api(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
        response_format: dict[str, str] | None,
    ) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            retry=retry_if_exception_type(OpenAIError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    response_format=response_format or NOT_GIVEN,  # type: ignore[arg-type]
                )

    def _normalize_response(self, raw: Any, latency_ms: float) -> LLMResponse:
        """Provider objects stop here."""
        choice = raw.choices[0]
        return LLMResponse(
            content=choice.message.content,
            finish_reason=_FINISH_REASONS.get(choice.finish_reason, "error"),
            usage=Usage(
                prompt_tokens=raw.usage.prompt_tokens,
                completion_tokens=raw.usage.completion_tokens,
                total_tokens=raw.usage.total_tokens,
            ),
            latency_ms=latency_ms,
        )
