"""Tool capability contract and a callable-backed implementation.

A tool is anything with ``name``, ``description``, ``parameters`` and an
``execute(ctx, arguments)`` method. The first three are pure queries used to
advertise the tool to the model; ``execute`` may perform arbitrary I/O and
signals failure by raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from agentloop.context import RunContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parameters:
    """Parameter schema for a tool.

    Attributes:
        properties: Mapping of argument name -> JSON Schema constraint.
        required: Names of the arguments the model must supply.
    """

    properties: dict[str, Any] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    def to_schema(self) -> dict:
        """Render as a JSON Schema object.

        Returns:
            ``{"type": "object", "properties": ..., "required": ...}`` with
            duplicate required names removed (first occurrence kept).
        """
        return {
            "type": "object",
            "properties": dict(self.properties),
            "required": list(dict.fromkeys(self.required)),
        }


@runtime_checkable
class Tool(Protocol):
    """Protocol for caller-supplied tools.

    Implementations must treat the RunContext as authoritative: long-running
    work should check ``ctx.raise_if_cancelled()`` and stop promptly.
    Return a ``str`` to send it to the model verbatim, or any
    JSON-serializable value to have it serialized first.
    """

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def parameters(self) -> Parameters: ...

    def execute(self, ctx: RunContext, arguments: dict[str, Any]) -> Any:
        """Run the tool with decoded arguments."""
        ...


@dataclass(frozen=True)
class FunctionTool:
    """A Tool backed by a plain callable.

    Attributes:
        name: Tool name, unique among the tools given to one agent.
        description: When and why the model should call this tool.
        parameters: Argument schema advertised to the model.
        handler: ``handler(ctx, arguments) -> result``.
    """

    name: str
    description: str
    handler: Callable[[RunContext, dict[str, Any]], Any]
    parameters: Parameters = field(default_factory=Parameters)

    def execute(self, ctx: RunContext, arguments: dict[str, Any]) -> Any:
        return self.handler(ctx, arguments)


def function_tool(
    *,
    name: str | None = None,
    description: str | None = None,
    properties: Mapping[str, Any] | None = None,
    required: list[str] | None = None,
) -> Callable[[Callable[[RunContext, dict[str, Any]], Any]], FunctionTool]:
    """Decorator turning ``handler(ctx, arguments)`` into a FunctionTool.

    Name and description default to the function's ``__name__`` and the
    first line of its docstring.

    Usage::

        @function_tool(properties={"city": {"type": "string"}}, required=["city"])
        def get_weather(ctx, arguments):
            \"\"\"Get current weather for a city.\"\"\"
            return {"city": arguments["city"], "temperature": "22C"}
    """

    def decorator(func: Callable[[RunContext, dict[str, Any]], Any]) -> FunctionTool:
        doc = (func.__doc__ or "").strip()
        return FunctionTool(
            name=name or func.__name__,
            description=description if description is not None else doc.split("\n", 1)[0],
            handler=func,
            parameters=Parameters(
                properties=dict(properties or {}),
                required=list(required or []),
            ),
        )

    return decorator
