"""Completion client protocol.

The orchestrator depends only on this request/reply shape, never on the
transport behind it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from agentloop.context import RunContext


@runtime_checkable
class CompletionClient(Protocol):
    """Protocol for pluggable chat completion clients.

    Any object with chat() and close() methods matching this signature works.
    The built-in OpenAIClient implements this protocol.

    ``chat()`` receives the ordered turn list and returns a dict in the
    OpenAI response shape: ``choices[0].message`` with optional ``content``
    and ``tool_calls``, plus a ``usage`` dict. Implementations must honor
    ``ctx``: refuse to start when it is cancelled and give up when its
    deadline passes.
    """

    def chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        ctx: RunContext | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
