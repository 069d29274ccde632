"""Completion-client error hierarchy.

All client errors inherit from TransportError, so the orchestrator treats
them the same way as any other failed remote call.
"""

from __future__ import annotations

from agentloop.exceptions import TransportError


class LLMClientError(TransportError):
    """Base for all completion client errors."""


class LLMConfigError(LLMClientError):
    """Missing or invalid client configuration (e.g., no API key)."""


class LLMConnectionError(LLMClientError):
    """The endpoint could not be reached or did not answer in time."""


class LLMStatusError(LLMClientError):
    """The endpoint answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status of the response.
        body: Response body text (may be truncated by the caller).
    """

    def __init__(self, status_code: int, body: str = "", message: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"HTTP {status_code} - {body}")


class LLMAuthError(LLMStatusError):
    """Authentication failed (401/403)."""


class LLMRateLimitError(LLMStatusError):
    """Rate limited by the API (429).

    Attributes:
        retry_after: Seconds from the Retry-After header, or None.
    """

    def __init__(self, body: str = "", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        message = f"Rate limited: HTTP 429 - {body}"
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(429, body, message)


class LLMResponseError(LLMClientError):
    """Response body did not have the expected chat completion shape."""
