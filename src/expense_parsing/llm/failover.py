"""Failover between two language model providers."""
from __future__ import annotations
import structlog
from ..models.expense import FallbackReason
from .base import LLMClient, LLMResponse
from .errors import RETRYABLE_REASONS, classify_llm_error

logger = structlog.get_logger(__name__)


class FailoverLLMClient(LLMClient):
    """Sends each request to *primary* and, when that provider is down, to *fallback*.

    Only provider-side failures (timeouts, rate limits, unavailability) switch
    providers. Any other error is raised straight away, as is the fallback's
    own error.
    """

    def __init__(self, primary: LLMClient, fallback: LLMClient):
        self._primary = primary
        self._fallback = fallback
        self._failover_count = 0
        self.last_failover_reason: FallbackReason | None = None

    async def complete_text(self, system_prompt, user_prompt, *, temperature=0.1, max_tokens=500, json_mode=False) -> LLMResponse:
        try:
            return await self._primary.complete_text(system_prompt, user_prompt, temperature=temperature, max_tokens=max_tokens, json_mode=json_mode)
        except Exception as e:
            reason = classify_llm_error(e)
            if reason not in RETRYABLE_REASONS:
                raise
            logger.warning(
                "primary_llm_failed",
                reason=reason.value,
                error=str(e),
                error_type=type(e).__name__,
                primary=self._primary.get_model_name(),
                fallback=self._fallback.get_model_name(),
            )
            self._failover_count += 1
            self.last_failover_reason = reason
        return await self._fallback.complete_text(system_prompt, user_prompt, temperature=temperature, max_tokens=max_tokens, json_mode=json_mode)

    def get_model_name(self) -> str:
        return f"{self._primary.get_model_name()} (failover: {self._fallback.get_model_name()})"

    @property
    def failover_count(self) -> int:
        return self._failover_count
