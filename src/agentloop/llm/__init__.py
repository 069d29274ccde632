"""Completion client infrastructure.

Provides the CompletionClient protocol, a built-in OpenAI-compatible HTTP
client, wire-format conversion and reply parsing.
"""

from agentloop.llm.client import OpenAIClient
from agentloop.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
)
from agentloop.llm.format import (
    build_messages,
    convert_message,
    convert_messages,
    convert_parameters,
)
from agentloop.llm.protocols import CompletionClient
from agentloop.llm.reply import ChatReply, ToolCall

__all__ = [
    "OpenAIClient",
    "CompletionClient",
    "ChatReply",
    "ToolCall",
    "build_messages",
    "convert_message",
    "convert_messages",
    "convert_parameters",
    "LLMClientError",
    "LLMConfigError",
    "LLMConnectionError",
    "LLMStatusError",
    "LLMAuthError",
    "LLMRateLimitError",
    "LLMResponseError",
]
