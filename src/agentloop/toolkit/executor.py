"""ToolExecutor: dispatches model tool calls to registered tools.

Provides a single ``execute()`` method that looks up the tool by name,
decodes the call's JSON arguments, invokes the tool under the run context
and returns the result encoded as text for the tool-result turn.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import pydantic_core

from agentloop.exceptions import (
    ArgumentDecodeError,
    RunCancelledError,
    ToolExecutionError,
    ToolResultEncodeError,
    UnknownToolError,
)

if TYPE_CHECKING:
    from agentloop.context import RunContext
    from agentloop.llm.reply import ToolCall
    from agentloop.toolkit.registry import ToolRegistry

logger = logging.getLogger(__name__)


def decode_arguments(call: ToolCall) -> dict[str, Any]:
    """Decode a call's JSON argument string into a dict.

    An empty string or JSON ``null`` decodes to ``{}``.

    Raises:
        ArgumentDecodeError: On malformed JSON or a non-object payload.
    """
    if not call.arguments.strip():
        return {}
    try:
        decoded = json.loads(call.arguments)
    except json.JSONDecodeError as exc:
        raise ArgumentDecodeError(call.name, call.id, call.arguments, str(exc)) from exc
    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise ArgumentDecodeError(
            call.name,
            call.id,
            call.arguments,
            f"expected a JSON object, got {type(decoded).__name__}",
        )
    return decoded


def encode_result(call: ToolCall, result: Any) -> str:
    """Encode a tool result for the tool-result turn.

    Strings are used verbatim. Everything else is serialized to JSON
    (dicts, lists, numbers, pydantic models, dataclasses, datetimes...).

    Raises:
        ToolResultEncodeError: If the value cannot be serialized.
    """
    if isinstance(result, str):
        return result
    try:
        return pydantic_core.to_json(result).decode("utf-8")
    except pydantic_core.PydanticSerializationError as exc:
        raise ToolResultEncodeError(
            call.name, call.id, f"result is not JSON-serializable: {exc}"
        ) from exc


class ToolExecutor:
    """Executes tool calls against a ToolRegistry.

    Calls naming an unregistered tool are skipped (``execute()`` returns
    None) unless ``strict`` is set, in which case UnknownToolError is raised.

    Usage::

        executor = ToolExecutor(registry)
        content = executor.execute(ctx, tool_call)
        if content is not None:
            history.append(tool_result_turn(tool_call.id, content))
    """

    def __init__(self, registry: ToolRegistry, *, strict: bool = False) -> None:
        self._registry = registry
        self._strict = strict

    def execute(self, ctx: RunContext, call: ToolCall) -> str | None:
        """Execute one tool call.

        Returns:
            The encoded result, or None if the tool is unknown and skipped.

        Raises:
            UnknownToolError: Unknown tool in strict mode.
            ArgumentDecodeError: Malformed arguments.
            ToolExecutionError: The tool raised, or its result is not
                serializable.
            RunCancelledError: The context was cancelled before or during
                execution.
        """
        tool = self._registry.get(call.name)
        if tool is None:
            if self._strict:
                raise UnknownToolError(call.name, call.id)
            logger.warning(
                "Skipping call %s to unknown tool %r (registered: %s)",
                call.id,
                call.name,
                self._registry.names(),
            )
            return None

        arguments = decode_arguments(call)
        ctx.raise_if_cancelled()

        logger.debug("Executing tool %s (call %s)", call.name, call.id)
        try:
            result = tool.execute(ctx, arguments)
        except RunCancelledError:
            raise
        except Exception as exc:
            logger.debug("Tool %s failed: %s", call.name, exc, exc_info=True)
            raise ToolExecutionError(
                call.name, call.id, f"{type(exc).__name__}: {exc}"
            ) from exc
        return encode_result(call, result)
