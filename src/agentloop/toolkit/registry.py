"""Name-keyed tool lookup built once per agent configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agentloop.exceptions import ToolConfigError
from agentloop.toolkit.models import Tool

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Immutable mapping of tool name -> Tool.

    Registration order is preserved so the advertised schemas are sent to the
    model in the order the caller listed the tools.

    Usage::

        registry = ToolRegistry([weather_tool, search_tool])
        registry.get("get_weather")   # -> weather_tool
        registry.get("missing")       # -> None
        payload_tools = registry.to_openai()
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if not isinstance(tool, Tool):
                raise ToolConfigError(
                    f"Expected a Tool, got {type(tool).__name__}"
                )
            if tool.name in self._tools:
                raise ToolConfigError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool
        logger.debug("Registered %d tool(s): %s", len(self._tools), list(self._tools))

    def get(self, name: str) -> Tool | None:
        """Return the tool registered under ``name``, or None."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def to_openai(self) -> list[dict]:
        """Render every tool in OpenAI function-calling format."""
        from agentloop.llm.format import convert_parameters

        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": convert_parameters(tool.parameters),
                },
            }
            for tool in self._tools.values()
        ]
