"""Shared test fixtures."""
import pytest
from unittest.mock import AsyncMock
from expense_parsing.llm.base import LLMClient, LLMResponse
from expense_parsing.config import Settings
from expense_parsing.prompts.registry import PromptRegistry
from tests.factories import make_group


@pytest.fixture
def mock_settings():
    """Create test settings with dummy values."""
    return Settings(
        openai_api_key="test-openai-key",
        anthropic_api_key="",
        llm_timeout=1.0,
        llm_max_retries=0,
        enable_failover=False,
    )


@pytest.fixture
def offline_settings():
    """Settings with the language model switched off."""
    return Settings(enable_llm=False)


@pytest.fixture
def mock_llm_client():
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.get_model_name.return_value = "mock-model"
    client.complete_text.return_value = LLMResponse(
        content='{"test": "response"}',
        model="mock-model",
        input_tokens=100,
        output_tokens=50,
    )
    return client


@pytest.fixture
def prompt_registry():
    return PromptRegistry()


@pytest.fixture
def group():
    return make_group()
