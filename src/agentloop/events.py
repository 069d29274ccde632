"""Response events and the stream that delivers them.

An orchestrator run produces an ordered sequence of Response events:
UsageResponse (one per remote call), ContentResponse (one per reply with
text) and at most one terminal ErrorResponse. Each variant carries only its
own payload; the ``usage``, ``content`` and ``error`` accessors are available
on every variant and return the zero value for the wrong tag.

Events are delivered through a ResponseStream, a single-pass iterator whose
producer only advances when the consumer asks for the next event.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Generator, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Usage:
    """Token counts for one remote call, or a running sum of several."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: Usage) -> Usage:
        if not isinstance(other, Usage):
            return NotImplemented
        return Usage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @classmethod
    def from_dict(cls, data: dict | None) -> Usage:
        """Build from an OpenAI-style ``usage`` dict; missing counts are 0."""
        if not data:
            return cls()
        return cls(
            prompt_tokens=int(data.get("prompt_tokens") or 0),
            completion_tokens=int(data.get("completion_tokens") or 0),
            total_tokens=int(data.get("total_tokens") or 0),
        )


class ResponseKind(str, enum.Enum):
    USAGE = "usage"
    CONTENT = "content"
    ERROR = "error"


class Response:
    """Base of the event union. Accessors default to zero values."""

    kind: ClassVar[ResponseKind]

    @property
    def usage(self) -> Usage:
        return Usage()

    @property
    def content(self) -> str:
        return ""

    @property
    def error(self) -> BaseException | None:
        return None

    def is_usage(self) -> bool:
        return self.kind is ResponseKind.USAGE

    def is_content(self) -> bool:
        return self.kind is ResponseKind.CONTENT

    def is_error(self) -> bool:
        return self.kind is ResponseKind.ERROR


@dataclass(frozen=True)
class UsageResponse(Response):
    """Token usage reported by one remote call."""

    tokens: Usage
    kind: ClassVar[ResponseKind] = ResponseKind.USAGE

    @property
    def usage(self) -> Usage:
        return self.tokens


@dataclass(frozen=True)
class ContentResponse(Response):
    """Text content of one model reply."""

    text: str
    kind: ClassVar[ResponseKind] = ResponseKind.CONTENT

    @property
    def content(self) -> str:
        return self.text


@dataclass(frozen=True)
class ErrorResponse(Response):
    """Terminal error. Always the last event of a stream."""

    cause: BaseException
    kind: ClassVar[ResponseKind] = ResponseKind.ERROR

    @property
    def error(self) -> BaseException | None:
        return self.cause


class StopReason(str, enum.Enum):
    """Why a stream stopped producing events."""

    RUNNING = "running"
    COMPLETED = "completed"
    MAX_ITERATIONS = "max_iterations"
    ERROR = "error"
    CLOSED = "closed"


@dataclass
class RunState:
    """Mutable bookkeeping for one run, shared by the loop and its stream."""

    history: list[dict] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    iterations: int = 0
    stop_reason: StopReason = StopReason.RUNNING


class ResponseStream:
    """Ordered, single-pass stream of Response events for one run.

    Wraps the generator that runs the orchestrator loop. The loop does no
    work until the first event is requested and pauses at every event until
    the consumer asks for the next one. The stream is closed exactly once:
    when the loop finishes (normally, at the iteration cap, or after the
    terminal error) or when ``close()`` is called early.

    Usage::

        with agent.stream_chat_completion(messages) as stream:
            for event in stream:
                if event.is_content():
                    print(event.content)
        print(stream.usage.total_tokens, stream.stop_reason)
    """

    def __init__(self, producer: Generator[Response, None, None], state: RunState) -> None:
        self._producer = producer
        self._state = state
        self._closed = False

    def __iter__(self) -> Iterator[Response]:
        return self

    def __next__(self) -> Response:
        if self._closed:
            raise StopIteration
        try:
            return next(self._producer)
        except StopIteration:
            self._finish()
            raise
        except BaseException:
            if self._state.stop_reason is StopReason.RUNNING:
                self._state.stop_reason = StopReason.ERROR
            self._finish()
            raise

    def close(self) -> None:
        """Stop the run if it is still going. Idempotent."""
        if self._closed:
            return
        self._producer.close()
        if self._state.stop_reason is StopReason.RUNNING:
            self._state.stop_reason = StopReason.CLOSED
        self._finish()

    def _finish(self) -> None:
        if not self._closed:
            self._closed = True
            logger.debug(
                "Stream closed: reason=%s iterations=%d total_tokens=%d",
                self._state.stop_reason.value,
                self._state.iterations,
                self._state.usage.total_tokens,
            )

    def __enter__(self) -> ResponseStream:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def usage(self) -> Usage:
        """Usage accumulated over every remote call made so far."""
        return self._state.usage

    @property
    def iterations(self) -> int:
        """Number of remote calls made so far."""
        return self._state.iterations

    @property
    def stop_reason(self) -> StopReason:
        return self._state.stop_reason

    @property
    def history(self) -> list[dict]:
        """Snapshot of the working conversation history."""
        return list(self._state.history)
