"""Integration tests for FastAPI endpoints."""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from expense_parsing.api.app import create_app
from expense_parsing.config import Settings
from expense_parsing.llm.base import LLMClient
from expense_parsing.pipeline import ExpenseExtractionPipeline
from tests.factories import make_llm_response, model_expense_payload

GROUP = {
    "group_id": "group-1",
    "participants": [{"id": "p1", "name": "John"}, {"id": "p2", "name": "Jane"}, {"id": "p3", "name": "Bob"}],
    "currency": "USD",
}


@pytest.fixture
def client():
    settings = Settings(enable_llm=False)
    app = create_app(settings)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def model_client():
    llm = AsyncMock(spec=LLMClient)
    llm.get_model_name.return_value = "mock-model"
    llm.complete_text.return_value = make_llm_response(model_expense_payload(title="Team dinner"))
    settings = Settings(openai_api_key="sk-test")
    app = create_app(settings, pipeline=ExpenseExtractionPipeline(settings, llm_client=llm))
    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.integration
class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"x-request-id": "abc123"})
        assert response.headers["x-request-id"] == "abc123"

    def test_request_id_generated(self, client):
        response = client.get("/health")
        assert len(response.headers["x-request-id"]) == 32

    def test_llm_health_without_model(self, client):
        data = client.get("/conversation/llm-health").json()
        assert data["is_healthy"] is False
        assert data["response_time_ms"] == 0
        assert "timestamp" in data

    def test_llm_health_with_model(self, model_client):
        assert model_client.get("/conversation/llm-health").json()["is_healthy"] is True


@pytest.mark.integration
class TestExpenseEndpoint:
    def test_local_extraction(self, client):
        response = client.post("/conversation/expense", json={
            "message": "I paid $50 for dinner with John and Jane yesterday",
            "locale": "en-US",
            "group": GROUP,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["amount"] == 5000
        assert data["participants"] == ["John", "Jane"]
        assert data["state"] == "success"
        assert data["source"] == "local"

    def test_model_extraction(self, model_client):
        response = model_client.post("/conversation/expense", json={
            "message": "I paid $50 for dinner with John and Jane yesterday",
            "group": GROUP,
        })
        assert response.json()["title"] == "Team dinner"

    def test_empty_message_rejected(self, client):
        response = client.post("/conversation/expense", json={"message": "", "group": GROUP})
        assert response.status_code == 422

    def test_feature_flag(self):
        app = create_app(Settings(enable_llm=False, enable_conversational_expense=False))
        response = TestClient(app).post("/conversation/expense", json={"message": "Taxi $20"})
        assert response.status_code == 404


@pytest.mark.integration
class TestIntentEndpoint:
    def test_balance_query(self, client):
        response = client.post("/conversation/intent", json={"message": "Who owes money?", "group": GROUP})
        assert response.status_code == 200
        assert response.json()["intent"] == "balance_query"

    def test_unclear(self, client):
        data = client.post("/conversation/intent", json={"message": "hello there"}).json()
        assert data["intent"] == "unclear"
        assert data["clarification_needed"]


@pytest.mark.integration
class TestConfigEndpoint:
    def test_config(self, client):
        data = client.get("/conversation/config").json()
        assert data["timeout_ms"] == 3000
        assert data["llm_enabled"] is False
        assert data["enable_fallback"] is True
