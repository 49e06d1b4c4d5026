"""Test the OpenAI client's retry loop."""
import httpx
import openai
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from expense_parsing.llm.openai_client import OpenAIClient

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content: str = '{"amount": 5000}'):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=30),
        model="gpt-4-turbo",
    )


@pytest.fixture
def client():
    client = OpenAIClient(api_key="test-key", max_retries=2, base_retry_delay=0)
    client._client = MagicMock()
    client._client.chat.completions.create = AsyncMock()
    return client


class TestOpenAIClient:
    @pytest.mark.asyncio
    async def test_success(self, client):
        client._client.chat.completions.create.return_value = _completion()

        response = await client.complete_text("sys", "user", json_mode=True)

        assert response.content == '{"amount": 5000}'
        assert response.input_tokens == 120
        kwargs = client._client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_retries_connection_error(self, client):
        client._client.chat.completions.create.side_effect = [
            openai.APIConnectionError(request=REQUEST),
            _completion("{}"),
        ]

        response = await client.complete_text("sys", "user")

        assert response.content == "{}"
        assert client._client.chat.completions.create.call_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_last_error(self, client):
        client._client.chat.completions.create.side_effect = openai.APIConnectionError(request=REQUEST)

        with pytest.raises(openai.APIConnectionError):
            await client.complete_text("sys", "user")
        assert client._client.chat.completions.create.call_count == 3

    @pytest.mark.asyncio
    async def test_auth_error_not_retried(self, client):
        client._client.chat.completions.create.side_effect = openai.AuthenticationError(
            "bad key", response=httpx.Response(401, request=REQUEST), body=None,
        )

        with pytest.raises(openai.AuthenticationError):
            await client.complete_text("sys", "user")
        assert client._client.chat.completions.create.call_count == 1

    def test_model_name(self, client):
        assert client.get_model_name() == "gpt-4-turbo (openai)"
