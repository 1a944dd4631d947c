# src/proofline/llms/__init__.py

"""LLM client layer behind the grammar oracle.

A thin, stateless abstraction over LLM providers. Retries only on transport
errors; provider objects never escape the adapter.

Example:
    >>> from proofline.llms import create_llm_client, LLMConfig, Message, Role
    >>>
    >>> client = create_llm_client(LLMConfig(provider="openai", model="gpt-4o"))
    >>> response = await client.complete(
    ...     messages=[Message(role=Role.USER, content="Check this sentence")],
    ...     json_output=True,
    ... )
"""

from .base import LLMClient, LLMResponse, Message, Role, Usage
from .config import LLMConfig
from .factory import create_llm_client

__all__ = [
    # Factory
    "create_llm_client",
    # Protocol
    "LLMClient",
    # Config
    "LLMConfig",
    # Types
    "Message",
    "Role",
    "LLMResponse",
    "Usage",
]
