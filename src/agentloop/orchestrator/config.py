"""Agent configuration.

AgentConfig enumerates every recognised option with its default. It is
frozen: one configured Agent can serve many concurrent runs because nothing
in its configuration changes after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from agentloop.toolkit.models import Tool

DEFAULT_MAX_ITERATIONS = 100

# Arguments the agent passes to chat() itself.
RESERVED_LLM_KWARGS = frozenset(
    {"messages", "model", "tools", "temperature", "max_tokens", "ctx"}
)


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for an Agent.

    Attributes:
        model: Model identifier sent with every request.
        system_prompt: Sent as the first system turn when non-empty.
        instructions: Standing instructions, sent as the first user turn
            (after the system prompt) when non-empty.
        tools: Tools advertised to the model. Names must be unique.
        max_iterations: Maximum remote calls per run. Reaching it ends the
            run silently; it is not an error.
        temperature: Sampling temperature (None = endpoint default).
        max_tokens: Maximum tokens per reply (None = endpoint default).
        extra_llm_kwargs: Additional payload fields (top_p, seed, etc.)
            forwarded to the client's chat(). Stored as a read-only copy;
            keys the agent sets itself (model, messages, tools, ...) are
            rejected.
        strict_tools: Raise UnknownToolError when the model calls an
            unregistered tool instead of skipping the call.
    """

    model: str
    system_prompt: str = ""
    instructions: str = ""
    tools: tuple[Tool, ...] = ()
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    temperature: float | None = None
    max_tokens: int | None = None
    extra_llm_kwargs: Mapping[str, Any] | None = field(default=None, hash=False)
    strict_tools: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.tools, tuple):
            object.__setattr__(self, "tools", tuple(self.tools))
        if self.max_iterations < 0:
            raise ValueError(
                f"max_iterations must be >= 0, got {self.max_iterations}"
            )
        if self.extra_llm_kwargs is not None:
            reserved = sorted(RESERVED_LLM_KWARGS.intersection(self.extra_llm_kwargs))
            if reserved:
                raise ValueError(
                    f"extra_llm_kwargs cannot set {', '.join(reserved)}"
                )
            object.__setattr__(
                self, "extra_llm_kwargs", MappingProxyType(dict(self.extra_llm_kwargs))
            )
