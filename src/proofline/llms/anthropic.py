# src/proofline/llms/anthropic.py

import logging
from time import monotonic
from typing import Any, Literal

from anthropic import NOT_GIVEN, APIError, AsyncAnthropic
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from proofline.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient, LLMResponse, Message, Role, Usage, record_completion
from .config import DEFAULT_MAX_TOKENS, DEFAULT_MODELS

logger = logging.getLogger(__name__)

# Prefilled assistant turn that forces the reply to continue a JSON object.
JSON_PREFILL = "{"

_STOP_REASONS: dict[str, Literal["stop", "length"]] = {
    "end_turn": "stop",
    "max_tokens": "length",
}


class AnthropicLLMClient(LLMClient):
    """Anthropic messages client.

    Stateless. Retries only transport and rate-limit failures. The system
    message travels as the separate ``system`` parameter. JSON mode prefills
    the assistant turn with ``{`` and puts it back on the reply.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODELS["anthropic"],
        timeout: float = 30.0,
        max_retries: int = 3,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self._max_tokens = max_tokens
        self.metrics_hook = metrics_hook
        logger.info("Anthropic client ready: model=%s, timeout=%s", model, timeout)

    async def complete(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
        json_output: bool = False,
    ) -> LLMResponse:
        start = monotonic()

        system = "\n\n".join(m.content for m in messages if m.role == Role.SYSTEM)
        turns = [
            {"role": m.role.value, "content": m.content}
            for m in messages
            if m.role != Role.SYSTEM
        ]
        if json_output:
            turns.append({"role": "assistant", "content": JSON_PREFILL})

        logger.debug(
            "Calling Anthropic: model=%s, messages=%d, json=%s",
            self._model,
            len(messages),
            json_output,
        )

        raw = await self._call_api(
            system=system,
            messages=turns,
            temperature=temperature,
            max_tokens=max_tokens or self._max_tokens,
        )
        response = self._normalize_response(
            raw, 1000 * (monotonic() - start), prefix=JSON_PREFILL if json_output else ""
        )

        record_completion(
            self.metrics_hook, provider="anthropic", model=self._model, response=response
        )
        logger.info(
            "Anthropic completion: finish=%s, tokens=%d, latency=%.0fms",
            response.finish_reason,
            response.usage.total_tokens,
            response.latency_ms,
        )
        return response

    async def _call_api(
        self,
        *,
        system: str,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            retry=retry_if_exception_type(APIError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._client.messages.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    system=system or NOT_GIVEN,
                )

    def _normalize_response(
        self, raw: Any, latency_ms: float, prefix: str = ""
    ) -> LLMResponse:
        """Provider objects stop here."""
        text_parts = [block.text for block in raw.content if block.type == "text"]
        return LLMResponse(
            content=prefix + "".join(text_parts) if text_parts else None,
            finish_reason=_STOP_REASONS.get(raw.stop_reason, "error"),
            usage=Usage(
                prompt_tokens=raw.usage.input_tokens,
                completion_tokens=raw.usage.output_tokens,
                total_tokens=raw.usage.input_tokens + raw.usage.output_tokens,
            ),
            latency_ms=latency_ms,
        )
