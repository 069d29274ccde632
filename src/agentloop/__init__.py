"""agentloop: a tool-calling conversation orchestrator.

Drives multi-turn exchanges with an OpenAI-compatible chat completion
endpoint, executing caller-supplied tools until the model stops asking for
them, and reports progress as a stream of usage/content/error events.
"""

from agentloop._version import __version__

# Orchestrator
from agentloop.orchestrator import Agent, AgentConfig, Completion, DEFAULT_MAX_ITERATIONS

# Messages
from agentloop.messages import (
    File,
    FileMessage,
    Image,
    ImageMessage,
    Message,
    MessageKind,
    Role,
    TextMessage,
    assistant_text_message,
    parse_message,
    system_message,
    user_file_message,
    user_image_message,
    user_text_message,
)

# Events
from agentloop.events import (
    ContentResponse,
    ErrorResponse,
    Response,
    ResponseKind,
    ResponseStream,
    StopReason,
    Usage,
    UsageResponse,
)

# Tools
from agentloop.toolkit import FunctionTool, Parameters, Tool, ToolRegistry, function_tool

# Context
from agentloop.context import RunContext

# Clients
from agentloop.llm import CompletionClient, OpenAIClient

# Exceptions
from agentloop.exceptions import (
    AgentLoopError,
    ArgumentDecodeError,
    DeadlineExceededError,
    MessageValidationError,
    RunCancelledError,
    ToolConfigError,
    ToolExecutionError,
    ToolResultEncodeError,
    TransportError,
    UnknownToolError,
)

__all__ = [
    "__version__",
    "Agent",
    "AgentConfig",
    "Completion",
    "DEFAULT_MAX_ITERATIONS",
    "File",
    "FileMessage",
    "Image",
    "ImageMessage",
    "Message",
    "MessageKind",
    "Role",
    "TextMessage",
    "assistant_text_message",
    "parse_message",
    "system_message",
    "user_file_message",
    "user_image_message",
    "user_text_message",
    "ContentResponse",
    "ErrorResponse",
    "Response",
    "ResponseKind",
    "ResponseStream",
    "StopReason",
    "Usage",
    "UsageResponse",
    "FunctionTool",
    "Parameters",
    "Tool",
    "ToolRegistry",
    "function_tool",
    "RunContext",
    "CompletionClient",
    "OpenAIClient",
    "AgentLoopError",
    "ArgumentDecodeError",
    "DeadlineExceededError",
    "MessageValidationError",
    "RunCancelledError",
    "ToolConfigError",
    "ToolExecutionError",
    "ToolResultEncodeError",
    "TransportError",
    "UnknownToolError",
]
