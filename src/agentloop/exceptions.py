"""agentloop exception hierarchy.

All agentloop-specific exceptions inherit from AgentLoopError. Every error
that terminates an orchestrator run is surfaced as the ``cause`` of the
single terminal ErrorResponse on the event stream.
"""

from __future__ import annotations


class AgentLoopError(Exception):
    """Base exception for all agentloop errors."""


class TransportError(AgentLoopError):
    """Raised when the remote completion call fails.

    Network, authentication and rate-limit failures are all opaque to the
    orchestrator. Exceptions raised by a custom client that are not
    agentloop errors are wrapped in this type.
    """


class ArgumentDecodeError(AgentLoopError):
    """Raised when a tool call's argument payload is not a JSON object."""

    def __init__(self, tool_name: str, call_id: str, arguments: str, reason: str) -> None:
        self.tool_name = tool_name
        self.call_id = call_id
        self.arguments = arguments
        super().__init__(
            f"Cannot decode arguments for tool '{tool_name}' "
            f"(call {call_id}): {reason}"
        )


class ToolExecutionError(AgentLoopError):
    """Raised when a tool's execute() fails."""

    def __init__(self, tool_name: str, call_id: str, message: str) -> None:
        self.tool_name = tool_name
        self.call_id = call_id
        super().__init__(f"Tool '{tool_name}' failed (call {call_id}): {message}")


class ToolResultEncodeError(ToolExecutionError):
    """Raised when a tool result cannot be serialized to JSON."""


class UnknownToolError(AgentLoopError):
    """Raised in strict mode when the model calls an unregistered tool."""

    def __init__(self, tool_name: str, call_id: str) -> None:
        self.tool_name = tool_name
        self.call_id = call_id
        super().__init__(f"Model requested unknown tool '{tool_name}' (call {call_id})")


class ToolConfigError(AgentLoopError):
    """Raised when the configured tool set is invalid (e.g., duplicate names)."""


class RunCancelledError(AgentLoopError):
    """Raised when the run's context has been cancelled."""


class DeadlineExceededError(RunCancelledError):
    """Raised when the run's context deadline has passed."""


class MessageValidationError(AgentLoopError):
    """Raised when message data does not match any message variant.

    Named MessageValidationError (not ValidationError) to avoid
    collision with pydantic.ValidationError.
    """
