"""Tests for the tool contract, registry and executor."""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass

import pytest

from agentloop import (
    ArgumentDecodeError,
    FunctionTool,
    Parameters,
    RunCancelledError,
    RunContext,
    Tool,
    ToolConfigError,
    ToolExecutionError,
    ToolRegistry,
    ToolResultEncodeError,
    UnknownToolError,
    function_tool,
)
from agentloop.llm.reply import ToolCall
from agentloop.toolkit import ToolExecutor, decode_arguments, encode_result
from tests.helpers import make_tool


class WeatherTool:
    """A hand-written Tool implementation (not a FunctionTool)."""

    name = "get_weather"
    description = "Get current weather for a location"
    parameters = Parameters(
        properties={"location": {"type": "string", "description": "The city name"}},
        required=["location"],
    )

    def execute(self, ctx, arguments):
        return {
            "location": arguments["location"],
            "temperature": "22°C",
            "condition": "Sunny",
        }


# ===========================================================================
# Parameters and Tool protocol
# ===========================================================================


class TestParameters:
    def test_to_schema(self):
        params = Parameters(
            properties={
                "name": {"type": "string", "description": "The name parameter"},
                "age": {"type": "integer", "description": "The age parameter"},
            },
            required=["name"],
        )
        schema = params.to_schema()
        assert schema["type"] == "object"
        assert schema["properties"] == params.properties
        assert schema["required"] == ["name"]

    def test_required_deduplicated_in_order(self):
        params = Parameters(properties={}, required=["b", "a", "b"])
        assert params.to_schema()["required"] == ["b", "a"]

    def test_empty_parameters(self):
        assert Parameters().to_schema() == {"type": "object", "properties": {}, "required": []}


class TestToolProtocol:
    def test_custom_class_is_a_tool(self):
        assert isinstance(WeatherTool(), Tool)

    def test_function_tool_is_a_tool(self):
        assert isinstance(make_tool(), Tool)

    def test_plain_object_is_not_a_tool(self):
        assert not isinstance(object(), Tool)

    def test_function_tool_execute(self):
        tool = make_tool("upper", lambda ctx, args: args["text"].upper())
        assert tool.execute(RunContext(), {"text": "abc"}) == "ABC"

    def test_function_tool_decorator(self):
        @function_tool(properties={"city": {"type": "string"}}, required=["city"])
        def get_weather(ctx, arguments):
            """Get current weather for a city.

            Longer explanation that is not advertised.
            """
            return arguments["city"]

        assert isinstance(get_weather, FunctionTool)
        assert get_weather.name == "get_weather"
        assert get_weather.description == "Get current weather for a city."
        assert get_weather.parameters.required == ["city"]
        assert get_weather.execute(RunContext(), {"city": "Oslo"}) == "Oslo"

    def test_function_tool_decorator_overrides(self):
        @function_tool(name="lookup", description="Look things up")
        def _impl(ctx, arguments):
            return None

        assert _impl.name == "lookup"
        assert _impl.description == "Look things up"


# ===========================================================================
# ToolRegistry
# ===========================================================================


class TestToolRegistry:
    def test_lookup(self):
        weather = WeatherTool()
        registry = ToolRegistry([weather, make_tool("echo")])
        assert registry.get("get_weather") is weather
        assert registry.get("missing") is None
        assert "echo" in registry
        assert len(registry) == 2
        assert registry.names() == ["get_weather", "echo"]

    def test_duplicate_names_rejected(self):
        with pytest.raises(ToolConfigError, match="Duplicate tool name: echo"):
            ToolRegistry([make_tool("echo"), make_tool("echo")])

    def test_non_tool_rejected(self):
        with pytest.raises(ToolConfigError):
            ToolRegistry(["not a tool"])

    def test_to_openai(self):
        registry = ToolRegistry([WeatherTool()])
        (spec,) = registry.to_openai()
        assert spec["type"] == "function"
        assert spec["function"]["name"] == "get_weather"
        assert spec["function"]["description"] == "Get current weather for a location"
        assert spec["function"]["parameters"] == {
            "type": "object",
            "properties": {"location": {"type": "string", "description": "The city name"}},
            "required": ["location"],
        }


# ===========================================================================
# Argument decoding and result encoding
# ===========================================================================


def _call(arguments: str, name: str = "echo") -> ToolCall:
    return ToolCall(id="call_1", name=name, arguments=arguments)


class TestDecodeArguments:
    def test_object(self):
        assert decode_arguments(_call('{"a": 1}')) == {"a": 1}

    @pytest.mark.parametrize("raw", ["", "   ", "null"])
    def test_empty_payloads(self, raw):
        assert decode_arguments(_call(raw)) == {}

    def test_malformed_json(self):
        with pytest.raises(ArgumentDecodeError) as exc_info:
            decode_arguments(_call('{"a": '))
        assert exc_info.value.tool_name == "echo"
        assert exc_info.value.call_id == "call_1"

    def test_non_object(self):
        with pytest.raises(ArgumentDecodeError, match="expected a JSON object"):
            decode_arguments(_call("[1, 2]"))


@dataclass
class _Point:
    x: int
    y: int


class TestEncodeResult:
    def test_string_verbatim(self):
        assert encode_result(_call("{}"), "plain text, not JSON") == "plain text, not JSON"

    def test_dict(self):
        out = encode_result(_call("{}"), {"temperature": "22°C"})
        assert json.loads(out) == {"temperature": "22°C"}

    def test_list_and_number(self):
        assert json.loads(encode_result(_call("{}"), [1, 2])) == [1, 2]
        assert encode_result(_call("{}"), 42) == "42"

    def test_dataclass_and_datetime(self):
        assert json.loads(encode_result(_call("{}"), _Point(1, 2))) == {"x": 1, "y": 2}
        out = encode_result(_call("{}"), datetime.date(2024, 1, 2))
        assert json.loads(out) == "2024-01-02"

    def test_unserializable(self):
        with pytest.raises(ToolResultEncodeError):
            encode_result(_call("{}"), object())

    def test_encode_error_is_execution_error(self):
        assert issubclass(ToolResultEncodeError, ToolExecutionError)


# ===========================================================================
# ToolExecutor
# ===========================================================================


class TestToolExecutor:
    def test_executes_and_encodes(self):
        executor = ToolExecutor(ToolRegistry([WeatherTool()]))
        out = executor.execute(RunContext(), _call('{"location": "Tokyo"}', "get_weather"))
        assert json.loads(out)["location"] == "Tokyo"

    def test_passes_context_through(self):
        seen = []
        tool = make_tool("probe", lambda ctx, args: seen.append(ctx) or "ok")
        ctx = RunContext()
        ToolExecutor(ToolRegistry([tool])).execute(ctx, _call("{}", "probe"))
        assert seen == [ctx]

    def test_unknown_tool_skipped(self, caplog):
        executor = ToolExecutor(ToolRegistry([make_tool("echo")]))
        with caplog.at_level("WARNING"):
            assert executor.execute(RunContext(), _call("{}", "nope")) is None
        assert "unknown tool 'nope'" in caplog.text

    def test_unknown_tool_strict(self):
        executor = ToolExecutor(ToolRegistry([]), strict=True)
        with pytest.raises(UnknownToolError):
            executor.execute(RunContext(), _call("{}", "nope"))

    def test_tool_failure_wrapped(self):
        def boom(ctx, args):
            raise RuntimeError("disk on fire")

        executor = ToolExecutor(ToolRegistry([make_tool("boom", boom)]))
        with pytest.raises(ToolExecutionError, match="RuntimeError: disk on fire") as exc_info:
            executor.execute(RunContext(), _call("{}", "boom"))
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_bad_arguments_not_executed(self):
        calls = []
        tool = make_tool("echo", lambda ctx, args: calls.append(args))
        executor = ToolExecutor(ToolRegistry([tool]))
        with pytest.raises(ArgumentDecodeError):
            executor.execute(RunContext(), _call("not json"))
        assert calls == []

    def test_cancelled_context_skips_execution(self):
        calls = []
        tool = make_tool("echo", lambda ctx, args: calls.append(args))
        ctx = RunContext()
        ctx.cancel()
        with pytest.raises(RunCancelledError):
            ToolExecutor(ToolRegistry([tool])).execute(ctx, _call("{}"))
        assert calls == []

    def test_cancellation_inside_tool_propagates_unwrapped(self):
        def cooperative(ctx, args):
            ctx.cancel("stop")
            ctx.raise_if_cancelled()

        executor = ToolExecutor(ToolRegistry([make_tool("slow", cooperative)]))
        with pytest.raises(RunCancelledError) as exc_info:
            executor.execute(RunContext(), _call("{}", "slow"))
        assert not isinstance(exc_info.value, ToolExecutionError)
