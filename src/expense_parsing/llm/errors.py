"""Map language-model failures onto the fallback taxonomy."""
from __future__ import annotations

import asyncio

import anthropic
import openai

from ..models.expense import FallbackReason

_TIMEOUT_ERRORS = (asyncio.TimeoutError, TimeoutError, openai.APITimeoutError, anthropic.APITimeoutError)
_RATE_LIMIT_ERRORS = (openai.RateLimitError, anthropic.RateLimitError)
_UNAVAILABLE_ERRORS = (
    openai.APIConnectionError,
    openai.AuthenticationError,
    openai.PermissionDeniedError,
    openai.NotFoundError,
    openai.InternalServerError,
    anthropic.APIConnectionError,
    anthropic.AuthenticationError,
    anthropic.PermissionDeniedError,
    anthropic.NotFoundError,
    anthropic.InternalServerError,
)

RETRYABLE_REASONS = frozenset({FallbackReason.TIMEOUT, FallbackReason.RATE_LIMIT, FallbackReason.API_UNAVAILABLE})


class LLMServiceError(Exception):
    """A language-model call that failed for a known reason."""

    def __init__(self, message: str, reason: FallbackReason = FallbackReason.UNKNOWN, retryable: bool | None = None):
        super().__init__(message)
        self.reason = reason
        self.retryable = reason in RETRYABLE_REASONS if retryable is None else retryable


def classify_llm_error(exc: BaseException) -> FallbackReason:
    """Return the fallback reason for an exception raised around a model call.

    JSON decoding and pydantic validation failures both derive from
    ``ValueError`` and count as parse errors.
    """
    if isinstance(exc, LLMServiceError):
        return exc.reason
    # APITimeoutError subclasses APIConnectionError, so timeouts are checked first.
    if isinstance(exc, _TIMEOUT_ERRORS):
        return FallbackReason.TIMEOUT
    if isinstance(exc, _RATE_LIMIT_ERRORS):
        return FallbackReason.RATE_LIMIT
    if isinstance(exc, _UNAVAILABLE_ERRORS):
        return FallbackReason.API_UNAVAILABLE
    if isinstance(exc, ValueError):
        return FallbackReason.PARSE_ERROR
    return FallbackReason.UNKNOWN
