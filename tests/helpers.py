"""Shared test helpers: response builders and a scripted completion client.

All tests use these fakes -- no real API calls.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from agentloop.toolkit import FunctionTool, Parameters


def chat_response(
    content: str | None = "",
    *,
    tool_calls: list[dict] | None = None,
    prompt_tokens: int = 10,
    completion_tokens: int = 5,
    total_tokens: int | None = None,
) -> dict:
    """Build a realistic OpenAI chat completion response dict."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = tool_calls
    return {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "model": "test-model",
        "choices": [
            {
                "index": 0,
                "message": message,
                "finish_reason": "tool_calls" if tool_calls else "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": (
                prompt_tokens + completion_tokens if total_tokens is None else total_tokens
            ),
        },
    }


def tool_call(name: str, arguments: dict | str, call_id: str = "call_1") -> dict:
    """Build one raw tool call entry (arguments JSON-encoded unless already a str)."""
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": name, "arguments": raw},
    }


def tool_call_response(*calls: dict, content: str = "", **usage: int) -> dict:
    """LLM response requesting the given tool calls."""
    return chat_response(content, tool_calls=list(calls), **usage)


class ScriptedClient:
    """A completion client that replays canned responses and records calls.

    Each entry in ``responses`` is either a response dict, an exception
    instance (raised), or a callable ``(messages, **kwargs) -> dict``.
    The last entry repeats once the script runs out.
    """

    def __init__(self, responses: list[Any]) -> None:
        self._responses = list(responses)
        self.calls: list[dict] = []
        self.closed = False

    def chat(self, messages: list[dict], **kwargs: Any) -> dict:
        self.calls.append({"messages": messages, **kwargs})
        idx = min(len(self.calls) - 1, len(self._responses) - 1)
        entry = self._responses[idx]
        if isinstance(entry, BaseException):
            raise entry
        if callable(entry):
            return entry(messages, **kwargs)
        return entry

    def close(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.calls)


def make_tool(
    name: str = "echo",
    handler: Callable | None = None,
    *,
    description: str = "Echo the arguments back.",
    properties: dict | None = None,
    required: list[str] | None = None,
) -> FunctionTool:
    """Create a FunctionTool; the default handler returns its arguments."""
    return FunctionTool(
        name=name,
        description=description,
        handler=handler or (lambda ctx, arguments: arguments),
        parameters=Parameters(
            properties=properties or {"text": {"type": "string"}},
            required=required if required is not None else [],
        ),
    )
