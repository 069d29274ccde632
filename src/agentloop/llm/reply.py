"""Parsed view of one chat completion reply.

Navigates ``response["choices"][0]["message"]`` of an OpenAI-format response
dict and exposes the pieces the orchestrator needs: text content, tool-call
requests (arguments left as the raw JSON string) and token usage.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field

from agentloop.events import Usage
from agentloop.llm.errors import LLMResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    """A tool invocation requested by the model.

    Attributes:
        id: Call identifier; the tool-result turn must echo it.
        name: Requested tool name.
        arguments: Raw JSON argument string, decoded at dispatch time.
    """

    id: str
    name: str
    arguments: str = ""

    def to_openai(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ChatReply:
    """One model reply.

    Attributes:
        content: Text content ("" when the reply has none).
        tool_calls: Tool-call requests in the order the model returned them.
        usage: Token counts for the call that produced this reply.
    """

    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    @classmethod
    def from_response(cls, response: dict) -> ChatReply:
        """Parse an OpenAI-format chat completion response dict.

        Raises:
            LLMResponseError: If the response has no first choice message or
                any part of it (tool calls, usage) is malformed.
        """
        try:
            message = response["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMResponseError(
                f"Cannot extract message from response: {exc!r}. "
                f"Response: {response}"
            ) from exc
        if not isinstance(message, dict):
            raise LLMResponseError(f"Unexpected message format: {message!r}")

        try:
            return cls(
                content=_content_text(message.get("content")),
                tool_calls=[_parse_tool_call(raw) for raw in message.get("tool_calls") or []],
                usage=Usage.from_dict(response.get("usage")),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise LLMResponseError(
                f"Malformed completion reply: {type(exc).__name__}: {exc}. "
                f"Response: {response}"
            ) from exc

    def to_turn(self) -> dict:
        """Render as the assistant turn appended to the history."""
        turn: dict = {"role": "assistant", "content": self.content or None}
        if self.tool_calls:
            turn["tool_calls"] = [tc.to_openai() for tc in self.tool_calls]
        return turn


def _content_text(content: object) -> str:
    """Flatten string or content-part list content to plain text."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return str(content)


def _parse_tool_call(raw: dict) -> ToolCall:
    func = raw.get("function") or {}
    call_id = raw.get("id") or f"call_{uuid.uuid4().hex[:8]}"
    arguments = func.get("arguments")
    if arguments is None:
        arguments = ""
    elif not isinstance(arguments, str):
        # Some providers send already-decoded argument objects.
        arguments = json.dumps(arguments)
    return ToolCall(id=call_id, name=func.get("name", ""), arguments=arguments)
