# tests/unit/llms/test_anthropic.py

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from proofline.llms.anthropic import AnthropicLLMClient
from proofline.llms.base import Message, Role


@pytest.fixture
def mock_anthropic_response() -> MagicMock:
    """Create a mock Anthropic response."""
    response = MagicMock()

    text_block = MagicMock()
    text_block.type = "text"
    text_block.text = '"hasError": false}'

    response.content = [text_block]
    response.stop_reason = "end_turn"
    response.usage.input_tokens = 10
    response.usage.output_tokens = 8
    return response


class TestAnthropicLLMClient:
    @pytest.mark.asyncio
    async def test_complete_basic(self, mock_anthropic_response: MagicMock) -> None:
        with patch("proofline.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=mock_anthropic_response)
            mock_anthropic.return_value = mock_client

            client = AnthropicLLMClient(api_key="test-key")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Hello!")]
            )

            assert response.content == '"hasError": false}'
            assert response.finish_reason == "stop"
            assert response.usage.total_tokens == 18

    @pytest.mark.asyncio
    async def test_system_message_sent_separately(
        self, mock_anthropic_response: MagicMock
    ) -> None:
        with patch("proofline.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            create = AsyncMock(return_value=mock_anthropic_response)
            mock_anthropic.return_value.messages.create = create

            client = AnthropicLLMClient(api_key="test-key")
            await client.complete(
                messages=[
                    Message(role=Role.SYSTEM, content="Be terse."),
                    Message(role=Role.USER, content="Hello"),
                ]
            )

            kwargs = create.call_args.kwargs
            assert kwargs["system"] == "Be terse."
            assert kwargs["messages"] == [{"role": "user", "content": "Hello"}]

    @pytest.mark.asyncio
    async def test_json_output_prefills_brace(
        self, mock_anthropic_response: MagicMock
    ) -> None:
        with patch("proofline.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            create = AsyncMock(return_value=mock_anthropic_response)
            mock_anthropic.return_value.messages.create = create

            client = AnthropicLLMClient(api_key="test-key")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Check")], json_output=True
            )

            assert create.call_args.kwargs["messages"][-1] == {
                "role": "assistant",
                "content": "{",
            }
            assert response.content == '{"hasError": false}'

    @pytest.mark.asyncio
    async def test_max_tokens_stop_reason(
        self, mock_anthropic_response: MagicMock
    ) -> None:
        mock_anthropic_response.stop_reason = "max_tokens"
        with patch("proofline.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            mock_anthropic.return_value.messages.create = AsyncMock(
                return_value=mock_anthropic_response
            )

            client = AnthropicLLMClient(api_key="test-key")
            response = await client.complete(
                messages=[Message(role=Role.USER, content="Hi")]
            )

            assert response.finish_reason == "length"
