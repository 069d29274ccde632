"""Tool capability contract, registry and executor."""

from agentloop.toolkit.executor import ToolExecutor, decode_arguments, encode_result
from agentloop.toolkit.models import FunctionTool, Parameters, Tool, function_tool
from agentloop.toolkit.registry import ToolRegistry

__all__ = [
    "Tool",
    "Parameters",
    "FunctionTool",
    "function_tool",
    "ToolRegistry",
    "ToolExecutor",
    "decode_arguments",
    "encode_result",
]
