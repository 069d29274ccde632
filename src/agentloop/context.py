"""Cooperative cancellation for orchestrator runs.

A RunContext is handed to the completion client and to every tool the
orchestrator executes. It carries a cancellation flag and an optional
deadline. Nothing is interrupted forcibly: long-running work is expected to
call ``raise_if_cancelled()`` or ``wait()`` at convenient points.

Usage::

    ctx = RunContext(timeout=30.0)
    for event in agent.stream_chat_completion(messages, ctx=ctx):
        ...

    # from another thread
    ctx.cancel()
"""

from __future__ import annotations

import threading
import time

from agentloop.exceptions import DeadlineExceededError, RunCancelledError


class RunContext:
    """Cancellation flag plus optional deadline, shared by one run.

    Child contexts created with ``with_timeout()`` are cancelled when their
    parent is cancelled, and never outlive the parent's deadline.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        parent: RunContext | None = None,
    ) -> None:
        self._event = threading.Event()
        self._parent = parent
        self._reason = ""

        deadline: float | None = None
        if timeout is not None:
            deadline = time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    @classmethod
    def background(cls) -> RunContext:
        """Return a fresh context with no deadline."""
        return cls()

    def with_timeout(self, seconds: float) -> RunContext:
        """Derive a child context that expires after ``seconds``."""
        return RunContext(timeout=seconds, parent=self)

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic()`` clock, or None."""
        return self._deadline

    def cancel(self, reason: str = "cancelled by caller") -> None:
        """Request cancellation. Idempotent; the first reason wins."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancelled (here or in a parent) or past the deadline."""
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.cancelled:
            return True
        return self.expired

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise RunCancelledError / DeadlineExceededError if the run must stop."""
        if self._event.is_set():
            raise RunCancelledError(self._reason)
        if self._parent is not None:
            self._parent.raise_if_cancelled()
        if self.expired:
            raise DeadlineExceededError("context deadline exceeded")

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``, waking early on cancellation.

        Returns:
            True if the context was cancelled while waiting.
        """
        end = time.monotonic() + seconds
        while True:
            if self.cancelled:
                return True
            left = end - time.monotonic()
            if left <= 0:
                return False
            remaining = self.remaining()
            if remaining is not None:
                left = min(left, remaining)
            # Short slices so a parent's cancellation is noticed too.
            self._event.wait(min(left, 0.05))
