"""Anthropic Claude LLM client."""
from __future__ import annotations

import asyncio
import time

import anthropic
import structlog

from .base import LLMClient, LLMResponse

logger = structlog.get_logger(__name__)

# Exceptions that are retryable
RETRYABLE_EXCEPTIONS = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)

JSON_ONLY_SUFFIX = "Respond with valid JSON only."


class AnthropicClient(LLMClient):
    """LLM client for Claude models through the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        timeout: float = 3.0,
        max_retries: int = 3,
        base_retry_delay: float = 0.5,
    ):
        self._model = model
        self._max_retries = max_retries
        self._base_retry_delay = base_retry_delay
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=float(timeout),
            max_retries=0,
        )

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.1,
        max_tokens: int = 500,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Text-only completion using the Anthropic Messages API."""
        messages = [{"role": "user", "content": user_prompt}]

        # No response_format switch here; JSON is requested in the prompt.
        if json_mode and not system_prompt.rstrip().endswith(JSON_ONLY_SUFFIX):
            system_prompt = system_prompt.rstrip() + "\n\n" + JSON_ONLY_SUFFIX

        return await self._call_with_retry(
            system_prompt=system_prompt,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    def get_model_name(self) -> str:
        """Return the model name being used."""
        return f"{self._model} (anthropic)"

    async def _call_with_retry(
        self,
        system_prompt: str,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        """Call the Anthropic API with exponential backoff retries."""
        last_exception: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                start = time.monotonic()
                response = await self._client.messages.create(
                    model=self._model,
                    system=system_prompt,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
                elapsed_ms = int((time.monotonic() - start) * 1000)

                content_text = ""
                for block in response.content:
                    if block.type == "text":
                        content_text += block.text

                return LLMResponse(
                    content=content_text,
                    model=response.model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                    finish_reason=response.stop_reason or "",
                    latency_ms=elapsed_ms,
                )

            except RETRYABLE_EXCEPTIONS as exc:
                last_exception = exc
                if attempt < self._max_retries:
                    delay = self._base_retry_delay * 2 ** attempt
                    logger.warning(
                        "anthropic_api_retry",
                        attempt=attempt + 1,
                        delay=delay,
                        error=str(exc),
                        model=self._model,
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        "anthropic_api_exhausted_retries",
                        attempts=self._max_retries + 1,
                        error=str(exc),
                        model=self._model,
                    )

        raise last_exception  # type: ignore[misc]
