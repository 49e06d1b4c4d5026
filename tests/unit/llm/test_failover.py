"""Test failover LLM client."""
import asyncio
import pytest
from unittest.mock import AsyncMock
from expense_parsing.llm.base import LLMClient, LLMResponse
from expense_parsing.llm.errors import LLMServiceError
from expense_parsing.llm.failover import FailoverLLMClient
from expense_parsing.models.expense import FallbackReason


@pytest.fixture
def primary():
    client = AsyncMock(spec=LLMClient)
    client.get_model_name.return_value = "primary-model"
    return client

@pytest.fixture
def fallback():
    client = AsyncMock(spec=LLMClient)
    client.get_model_name.return_value = "fallback-model"
    return client


class TestFailover:
    @pytest.mark.asyncio
    async def test_primary_succeeds(self, primary, fallback):
        response = LLMResponse(content="ok", model="primary-model")
        primary.complete_text.return_value = response

        client = FailoverLLMClient(primary, fallback)
        result = await client.complete_text("sys", "user")

        assert result.content == "ok"
        primary.complete_text.assert_called_once()
        fallback.complete_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_fails_fallback_called(self, primary, fallback):
        primary.complete_text.side_effect = asyncio.TimeoutError()
        fallback_response = LLMResponse(content="fallback ok", model="fallback-model")
        fallback.complete_text.return_value = fallback_response

        client = FailoverLLMClient(primary, fallback)
        result = await client.complete_text("sys", "user")

        assert result.content == "fallback ok"
        assert client.failover_count == 1
        assert client.last_failover_reason == FallbackReason.TIMEOUT

    @pytest.mark.asyncio
    async def test_both_fail_raises(self, primary, fallback):
        primary.complete_text.side_effect = LLMServiceError("primary down", FallbackReason.API_UNAVAILABLE)
        fallback.complete_text.side_effect = TimeoutError("fallback down")

        client = FailoverLLMClient(primary, fallback)
        with pytest.raises(TimeoutError):
            await client.complete_text("sys", "user")

    @pytest.mark.asyncio
    async def test_options_forwarded_to_fallback(self, primary, fallback):
        primary.complete_text.side_effect = asyncio.TimeoutError()
        fallback.complete_text.return_value = LLMResponse(content="{}", model="fallback-model")

        client = FailoverLLMClient(primary, fallback)
        await client.complete_text("sys", "user", temperature=0.0, max_tokens=50, json_mode=True)

        fallback.complete_text.assert_called_once_with("sys", "user", temperature=0.0, max_tokens=50, json_mode=True)

    def test_model_name(self, primary, fallback):
        client = FailoverLLMClient(primary, fallback)
        assert client.get_model_name() == "primary-model (failover: fallback-model)"

    @pytest.mark.asyncio
    async def test_parse_errors_do_not_fail_over(self, primary, fallback):
        primary.complete_text.side_effect = ValueError("bad JSON")

        client = FailoverLLMClient(primary, fallback)
        with pytest.raises(ValueError):
            await client.complete_text("sys", "user")
        fallback.complete_text.assert_not_called()
        assert client.failover_count == 0
