"""Built-in OpenAI-compatible httpx client.

Provides a sync HTTP client for OpenAI-compatible chat completion APIs.
Reads configuration from constructor arguments or environment variables.
Retries are opt-in (``max_attempts > 1``); by default a failed call is
reported straight back to the orchestrator, which never retries.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import httpx
import tenacity

from agentloop.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
)

if TYPE_CHECKING:
    from agentloop.context import RunContext

logger = logging.getLogger(__name__)

API_KEY_ENV = "AGENTLOOP_OPENAI_API_KEY"
BASE_URL_ENV = "AGENTLOOP_OPENAI_BASE_URL"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}
_MAX_BODY_IN_ERROR = 2000


def _is_retryable(exc: BaseException) -> bool:
    """Retryable: 429, 500, 502, 503, 504 and connection failures."""
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMStatusError):
        return exc.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, LLMConnectionError)


class _ContextCancelled(tenacity.stop.stop_base):
    """Stop retrying once the run context is cancelled or expired."""

    def __init__(self, ctx: RunContext | None) -> None:
        self._ctx = ctx

    def __call__(self, retry_state: tenacity.RetryCallState) -> bool:
        return self._ctx is not None and self._ctx.cancelled


class OpenAIClient:
    """Sync httpx client for OpenAI-compatible chat completions.

    Implements the CompletionClient protocol. Authentication errors
    (401, 403) are never retried; with ``max_attempts > 1`` transient
    errors (429, 5xx, connection failures) are retried with exponential
    backoff.

    Usage::

        with OpenAIClient(api_key="sk-...") as client:
            response = client.chat(
                [{"role": "user", "content": "Hello"}], model="gpt-4o-mini"
            )
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str = "gpt-4o-mini",
        timeout: float = 120.0,
        max_attempts: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key. Falls back to AGENTLOOP_OPENAI_API_KEY.
            base_url: API base URL. Falls back to AGENTLOOP_OPENAI_BASE_URL,
                then to https://api.openai.com/v1.
            default_model: Model used when chat() is given none.
            timeout: Request timeout in seconds (further capped by the
                run context's deadline).
            max_attempts: Total attempts per chat() call, including the first.
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set {API_KEY_ENV} "
                "environment variable."
            )
        if max_attempts < 1:
            raise LLMConfigError(f"max_attempts must be >= 1, got {max_attempts}")
        self._base_url = (
            base_url or os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)
        ).rstrip("/")
        self._default_model = default_model
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def chat(
        self,
        messages: list[dict],
        *,
        model: str | None = None,
        tools: list[dict] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        ctx: RunContext | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send a chat completion request.

        Uses tenacity.Retrying programmatically (not as decorator) so that
        max_attempts is configurable per-instance.

        Returns:
            Full response dict with 'choices', 'usage', 'model', etc.

        Raises:
            RunCancelledError: If ``ctx`` is cancelled before sending.
            LLMAuthError: On 401/403.
            LLMRateLimitError: On 429.
            LLMStatusError: On any other non-success status.
            LLMConnectionError: If the endpoint cannot be reached in time.
            LLMResponseError: On unexpected response format.
        """
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_attempts) | _ContextCancelled(ctx),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retryer(
            self._do_chat,
            messages,
            model=model,
            tools=tools,
            temperature=temperature,
            max_tokens=max_tokens,
            ctx=ctx,
            **kwargs,
        )

    def _do_chat(
        self,
        messages: list[dict],
        *,
        model: str | None,
        tools: list[dict] | None,
        temperature: float | None,
        max_tokens: int | None,
        ctx: RunContext | None,
        **kwargs: Any,
    ) -> dict:
        """Execute a single chat completion request (no retry)."""
        timeout = self._timeout
        if ctx is not None:
            ctx.raise_if_cancelled()
            remaining = ctx.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)

        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        logger.debug(
            "POST %s/chat/completions model=%s turns=%d tools=%d",
            self._base_url,
            payload["model"],
            len(messages),
            len(tools or []),
        )
        try:
            response = self._client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                timeout=timeout,
            )
        except httpx.TransportError as exc:
            raise LLMConnectionError(f"{type(exc).__name__}: {exc}") from exc

        body = response.text[:_MAX_BODY_IN_ERROR]
        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                response.status_code,
                body,
                f"Authentication failed: HTTP {response.status_code} - {body}",
            )
        if response.status_code == 429:
            raise LLMRateLimitError(
                body, retry_after=_parse_retry_after(response.headers.get("Retry-After"))
            )
        if response.is_error:
            raise LLMStatusError(response.status_code, body)

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError(f"Response is not JSON: {body}") from exc
        if not isinstance(data, dict) or "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        return data

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> OpenAIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _parse_retry_after(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None
