"""Application configuration via environment variables with EXPENSE_ prefix."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Expense parsing service configuration.

    All settings are read from environment variables prefixed with ``EXPENSE_``.
    API keys are wrapped in ``SecretStr`` so they are never accidentally logged
    or serialised.
    """

    model_config = SettingsConfigDict(env_prefix="EXPENSE_")

    # ── Language model provider ────────────────────────────────────────────
    # "openai" uses OpenAI (or Azure OpenAI when an endpoint is set) as the
    # primary client; "anthropic" uses Claude. With failover enabled and both
    # keys present the other provider becomes the fallback.
    llm_provider: Literal["openai", "anthropic"] = "openai"

    openai_api_key: SecretStr = SecretStr("")
    azure_openai_endpoint: str = ""
    openai_model: str = "gpt-4-turbo"

    anthropic_api_key: SecretStr = SecretStr("")
    anthropic_model: str = "claude-sonnet-4-5-20250929"

    # ── Model call budget ──────────────────────────────────────────────────
    llm_timeout: float = Field(default=3.0, gt=0.0)
    llm_max_retries: int = Field(default=3, ge=0)
    llm_base_retry_delay: float = Field(default=0.5, ge=0.0)
    llm_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=500, ge=1)

    # ── Confidence thresholds ──────────────────────────────────────────────
    success_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    ambiguity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)

    # ── Locale defaults ────────────────────────────────────────────────────
    default_locale: str = "en-US"
    default_currency: str = "USD"

    # ── Feature flags ──────────────────────────────────────────────────────
    enable_llm: bool = True
    enable_failover: bool = True
    enable_conversational_expense: bool = True

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ── API ─────────────────────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    @property
    def llm_configured(self) -> bool:
        """True when the selected primary provider has an API key."""
        if self.llm_provider == "anthropic":
            return bool(self.anthropic_api_key.get_secret_value())
        return bool(self.openai_api_key.get_secret_value())
