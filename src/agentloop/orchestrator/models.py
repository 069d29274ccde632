"""Orchestrator result models."""

from __future__ import annotations

from dataclasses import dataclass, field

from agentloop.events import Response, StopReason, Usage


@dataclass(frozen=True)
class Completion:
    """Aggregate of a whole run, as returned by ``Agent.chat_completion()``.

    Attributes:
        messages: Text of every ContentResponse, in order.
        responses: Every event the run produced, in order.
        usage: Sum of the usage reported by each remote call.
        stop_reason: ``completed`` or ``max_iterations``.
        iterations: Number of remote calls made.
    """

    messages: list[str] = field(default_factory=list)
    responses: list[Response] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    stop_reason: StopReason = StopReason.COMPLETED
    iterations: int = 0

    @property
    def text(self) -> str:
        """All content joined with blank lines."""
        return "\n\n".join(self.messages)

    @property
    def exhausted(self) -> bool:
        """True when the run stopped at the iteration cap."""
        return self.stop_reason is StopReason.MAX_ITERATIONS
