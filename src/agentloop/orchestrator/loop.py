"""Core agent loop.

Provides the Agent class that runs a tool-calling loop against a chat
completion client: send the history and tool schemas, report usage and
content, execute the requested tool calls, append their results, repeat
until the model stops calling tools or max_iterations is reached.

Each run is a generator wrapped in a ResponseStream. The generator owns the
run's history and bookkeeping, so concurrent runs of one Agent share nothing
but the (frozen) configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from agentloop.context import RunContext
from agentloop.events import (
    ContentResponse,
    ErrorResponse,
    ResponseStream,
    RunState,
    StopReason,
    Usage,
    UsageResponse,
)
from agentloop.exceptions import AgentLoopError, TransportError
from agentloop.llm.format import build_messages, tool_result_turn
from agentloop.llm.reply import ChatReply
from agentloop.orchestrator.config import AgentConfig
from agentloop.orchestrator.models import Completion
from agentloop.toolkit.executor import ToolExecutor
from agentloop.toolkit.registry import ToolRegistry

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence

    from agentloop.events import Response
    from agentloop.llm.protocols import CompletionClient
    from agentloop.llm.reply import ToolCall
    from agentloop.messages import Message

logger = logging.getLogger(__name__)


class Agent:
    """Tool-calling conversation orchestrator.

    Usage::

        from agentloop import Agent, user_text_message

        with Agent.open("gpt-4o-mini", tools=[weather_tool]) as agent:
            for event in agent.stream_chat_completion(
                [user_text_message("What is the weather in Tokyo?")]
            ):
                if event.is_content():
                    print(event.content)
    """

    def __init__(
        self,
        client: CompletionClient,
        config: AgentConfig,
        *,
        owns_client: bool = False,
    ) -> None:
        """Create an agent around an existing completion client.

        Args:
            client: Any CompletionClient implementation.
            config: Agent configuration.
            owns_client: Close ``client`` when the agent is closed.

        Raises:
            ToolConfigError: If the configured tools are invalid.
        """
        self._client = client
        self._config = config
        self._owns_client = owns_client
        self._registry = ToolRegistry(config.tools)
        self._tool_specs = self._registry.to_openai()
        self._executor = ToolExecutor(self._registry, strict=config.strict_tools)

    @classmethod
    def open(
        cls,
        model: str,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
        max_attempts: int = 1,
        **options: Any,
    ) -> Agent:
        """Create an agent backed by the built-in OpenAIClient.

        Args:
            model: Model identifier.
            api_key: API key (falls back to AGENTLOOP_OPENAI_API_KEY).
            base_url: Endpoint base URL (falls back to AGENTLOOP_OPENAI_BASE_URL).
            timeout: Per-request timeout in seconds.
            max_attempts: Transport-level attempts per remote call.
            **options: Remaining AgentConfig fields (system_prompt,
                instructions, tools, max_iterations, ...).
        """
        from agentloop.llm.client import OpenAIClient

        client = OpenAIClient(
            api_key=api_key,
            base_url=base_url,
            default_model=model,
            timeout=timeout,
            max_attempts=max_attempts,
        )
        return cls(client, AgentConfig(model=model, **options), owns_client=True)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def tools(self) -> ToolRegistry:
        return self._registry

    def stream_chat_completion(
        self,
        messages: Sequence[Message],
        ctx: RunContext | None = None,
    ) -> ResponseStream:
        """Start a run and return its event stream.

        Nothing is sent until the first event is requested. Every remote
        call yields one UsageResponse, followed by a ContentResponse when
        the reply has text. Any failure yields one terminal ErrorResponse.

        Args:
            messages: Caller conversation, oldest first.
            ctx: Cancellation/deadline context shared with the client and
                every tool. Defaults to a fresh context with no deadline.
        """
        history = build_messages(
            messages,
            system_prompt=self._config.system_prompt,
            instructions=self._config.instructions,
        )
        state = RunState(history=history)
        return ResponseStream(self._run(state, ctx or RunContext()), state)

    def chat_completion(
        self,
        messages: Sequence[Message],
        ctx: RunContext | None = None,
    ) -> Completion:
        """Run to completion and aggregate the event stream.

        Returns:
            Completion with every content text, every event and summed usage.

        Raises:
            AgentLoopError: The run's terminal error. Content already
                produced is discarded; consume stream_chat_completion()
                directly to keep it.
        """
        texts: list[str] = []
        responses: list[Response] = []
        usage = Usage()
        with self.stream_chat_completion(messages, ctx) as stream:
            for response in stream:
                responses.append(response)
                if response.is_usage():
                    usage += response.usage
                if response.is_content():
                    texts.append(response.content)
                if response.is_error():
                    raise response.error
        return Completion(
            messages=texts,
            responses=responses,
            usage=usage,
            stop_reason=stream.stop_reason,
            iterations=stream.iterations,
        )

    def close(self) -> None:
        """Close the completion client if this agent created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Agent:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    def _run(self, state: RunState, ctx: RunContext) -> Generator[Response, None, None]:
        """Drive one run, yielding events as they happen."""
        max_iterations = self._config.max_iterations
        try:
            while state.iterations < max_iterations:
                reply = self._call_completion(state.history, ctx)
                state.iterations += 1
                state.usage += reply.usage
                logger.debug(
                    "Iteration %d: content=%d chars, tool_calls=%d, tokens=%d",
                    state.iterations,
                    len(reply.content),
                    len(reply.tool_calls),
                    reply.usage.total_tokens,
                )
                yield UsageResponse(reply.usage)

                # Empty, toolless replies are not worth a history turn.
                if reply.content or reply.has_tool_calls:
                    state.history.append(reply.to_turn())
                if reply.content:
                    yield ContentResponse(reply.content)

                if not reply.has_tool_calls:
                    state.stop_reason = StopReason.COMPLETED
                    return
                self._dispatch(reply.tool_calls, state, ctx)

            state.stop_reason = StopReason.MAX_ITERATIONS
            logger.info(
                "Run stopped at max_iterations=%d with tool calls pending",
                max_iterations,
            )
        except AgentLoopError as exc:
            state.stop_reason = StopReason.ERROR
            logger.debug("Run failed after %d iteration(s): %s", state.iterations, exc)
            yield ErrorResponse(exc)

    def _call_completion(self, history: list[dict], ctx: RunContext) -> ChatReply:
        """Send the current history to the completion client.

        Raises:
            RunCancelledError: If the context is already cancelled.
            TransportError: If the client fails or its reply is malformed.
                Non-agentloop exceptions raised by custom clients are wrapped.
        """
        ctx.raise_if_cancelled()
        extra = self._config.extra_llm_kwargs or {}
        try:
            response = self._client.chat(
                list(history),
                model=self._config.model,
                tools=self._tool_specs or None,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                ctx=ctx,
                **extra,
            )
            return ChatReply.from_response(response)
        except AgentLoopError:
            raise
        except Exception as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

    def _dispatch(
        self,
        tool_calls: list[ToolCall],
        state: RunState,
        ctx: RunContext,
    ) -> None:
        """Execute tool calls in model order, appending one result turn each."""
        for call in tool_calls:
            content = self._executor.execute(ctx, call)
            if content is None:
                continue
            state.history.append(tool_result_turn(call.id, content))
