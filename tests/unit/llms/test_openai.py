# tests/unit/llms/test_openai.py

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import OpenAIError

from proofline.llms.base import Message, Role
from proofline.llms.openai import OpenAILLMClient


@pytest.fixture
def mock_openai_response() -> MagicMock:
    """Create a mock OpenAI response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = '{"hasError": false}'
    response.choices[0].finish_reason = "stop"
    response.usage.prompt_tokens = 10
    response.usage.completion_tokens = 8
    response.usage.total_tokens = 18
    return response


class TestOpenAILLMClient:
    @pytest.mark.asyncio
    async def test_complete_basic(self, mock_openai_response: MagicMock) -> None:
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            mock_client = MagicMock()
            mock_client.chat.completions.create = AsyncMock(
                return_value=mock_openai_response
            )
            mock_openai.return_value = mock_client

            client = OpenAILLMClient(api_key="test-key", model="gpt-4o")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Hello!")]
            )

            assert response.content == '{"hasError": false}'
            assert response.finish_reason == "stop"
            assert response.usage.total_tokens == 18
            assert response.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_json_output_requests_json_object(
        self, mock_openai_response: MagicMock
    ) -> None:
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            create = AsyncMock(return_value=mock_openai_response)
            mock_openai.return_value.chat.completions.create = create

            client = OpenAILLMClient(api_key="test-key")
            await client.complete(
                messages=[Message(role=Role.USER, content="Hi")], json_output=True
            )

            assert create.call_args.kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_request_carries_messages_and_token_limit(
        self, mock_openai_response: MagicMock
    ) -> None:
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            create = AsyncMock(return_value=mock_openai_response)
            mock_openai.return_value.chat.completions.create = create

            client = OpenAILLMClient(api_key="test-key", max_tokens=128)
            await client.complete(
                messages=[
                    Message(role=Role.SYSTEM, content="You are helpful."),
                    Message(role=Role.USER, content="Hello"),
                ]
            )

            kwargs = create.call_args.kwargs
            assert kwargs["messages"] == [
                {"role": "system", "content": "You are helpful."},
                {"role": "user", "content": "Hello"},
            ]
            assert kwargs["max_tokens"] == 128

    @pytest.mark.asyncio
    async def test_finish_reason_length(self, mock_openai_response: MagicMock) -> None:
        mock_openai_response.choices[0].finish_reason = "length"
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            mock_openai.return_value.chat.completions.create = AsyncMock(
                return_value=mock_openai_response
            )

            client = OpenAILLMClient(api_key="test-key")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Hi")]
            )

            assert response.finish_reason == "length"

    @pytest.mark.asyncio
    async def test_metrics_hook_called(self, mock_openai_response: MagicMock) -> None:
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            mock_openai.return_value.chat.completions.create = AsyncMock(
                return_value=mock_openai_response
            )

            metrics_hook = MagicMock()
            client = OpenAILLMClient(api_key="test-key", metrics_hook=metrics_hook)

            await client.complete(messages=[Message(role=Role.USER, content="Hi")])

            metrics_hook.record_latency.assert_called_once()
            assert metrics_hook.record_latency.call_args[0][0] == "llm_completion_duration"

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried_then_raised(self) -> None:
        with patch("proofline.llms.openai.AsyncOpenAI") as mock_openai:
            create = AsyncMock(side_effect=OpenAIError("connection reset"))
            mock_openai.return_value.chat.completions.create = create

            client = OpenAILLMClient(api_key="test-key", max_retries=2)
            with pytest.raises(OpenAIError):
                await client.complete(messages=[Message(role=Role.USER, content="Hi")])

            assert create.await_count == 2
