"""Provider-neutral language model interface used by the extraction passes."""
from __future__ import annotations
from abc import ABC, abstractmethod
from pydantic import BaseModel


class LLMResponse(BaseModel):
    """One completion, with the usage figures reported by the provider."""
    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = ""
    latency_ms: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMClient(ABC):
    """A chat model that answers one system/user prompt pair.

    Implementations raise their SDK's exceptions unchanged once their own
    retries are exhausted; ``llm.errors.classify_llm_error`` maps those onto a
    ``FallbackReason``.
    """

    @abstractmethod
    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.1,
        max_tokens: int = 500,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Return the model's reply; with *json_mode* the reply should be a JSON object."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Human-readable model and provider, used in log events."""
