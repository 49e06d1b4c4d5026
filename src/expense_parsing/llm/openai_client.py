"""OpenAI LLM client, for the OpenAI API or an Azure OpenAI deployment."""
from __future__ import annotations

import asyncio
import time

import openai
import structlog

from .base import LLMClient, LLMResponse

logger = structlog.get_logger(__name__)

# Exceptions that are retryable
RETRYABLE_EXCEPTIONS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


class OpenAIClient(LLMClient):
    """LLM client for GPT models.

    With ``azure_endpoint`` set the client talks to an Azure OpenAI resource
    and ``model`` is the deployment name; otherwise it uses the public API.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4-turbo",
        azure_endpoint: str = "",
        timeout: float = 3.0,
        max_retries: int = 3,
        base_retry_delay: float = 0.5,
    ):
        self._model = model
        self._max_retries = max_retries
        self._base_retry_delay = base_retry_delay

        # Retries are ours; the SDK's own retry loop is disabled.
        if azure_endpoint:
            self._client = openai.AsyncAzureOpenAI(
                api_key=api_key,
                azure_endpoint=azure_endpoint,
                api_version="2024-06-01",
                timeout=float(timeout),
                max_retries=0,
            )
            self._provider = "azure_openai"
        else:
            self._client = openai.AsyncOpenAI(
                api_key=api_key,
                timeout=float(timeout),
                max_retries=0,
            )
            self._provider = "openai"

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.1,
        max_tokens: int = 500,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Text-only completion using the Chat Completions API."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        kwargs: dict = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        return await self._call_with_retry(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

    def get_model_name(self) -> str:
        """Return the model name being used."""
        return f"{self._model} ({self._provider})"

    async def _call_with_retry(
        self,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        **kwargs,
    ) -> LLMResponse:
        """Call the API with exponential backoff retries."""
        last_exception: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                start = time.monotonic()
                response = await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    **kwargs,
                )
                elapsed_ms = int((time.monotonic() - start) * 1000)

                choice = response.choices[0]
                content_text = choice.message.content or ""

                input_tokens = 0
                output_tokens = 0
                if response.usage is not None:
                    input_tokens = response.usage.prompt_tokens
                    output_tokens = response.usage.completion_tokens

                return LLMResponse(
                    content=content_text,
                    model=response.model or self._model,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    finish_reason=choice.finish_reason or "",
                    latency_ms=elapsed_ms,
                )

            except RETRYABLE_EXCEPTIONS as exc:
                last_exception = exc
                if attempt < self._max_retries:
                    delay = self._base_retry_delay * 2 ** attempt
                    logger.warning(
                        "openai_api_retry",
                        attempt=attempt + 1,
                        delay=delay,
                        error=str(exc),
                        model=self._model,
                        provider=self._provider,
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.error(
                        "openai_api_exhausted_retries",
                        attempts=self._max_retries + 1,
                        error=str(exc),
                        model=self._model,
                        provider=self._provider,
                    )

        raise last_exception  # type: ignore[misc]
