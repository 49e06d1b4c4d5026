"""Test data factories for building test objects."""
import json
from datetime import date
from expense_parsing.llm.base import LLMResponse
from expense_parsing.models.expense import (
    Category, ExpenseCandidate, ExpenseExtractionResult, ExtractionRequest,
    ExtractionSource, ExtractionState, GroupContext, Participant,
)

TODAY = date(2026, 10, 19)


def make_group(
    names: tuple[str, ...] = ("John", "Jane", "Bob"),
    currency: str = "USD",
    categories: list[str] | None = None,
    active_participant_id: str | None = None,
) -> GroupContext:
    return GroupContext(
        group_id="group-1",
        participants=[Participant(id=f"p{i}", name=name) for i, name in enumerate(names, start=1)],
        currency=currency,
        categories=[Category(id=i, name=name) for i, name in enumerate(categories or [], start=1)],
        active_participant_id=active_participant_id,
    )


def make_request(
    message: str = "I paid $50 for dinner with John and Jane yesterday",
    locale: str = "en-US",
    group: GroupContext | None = None,
) -> ExtractionRequest:
    return ExtractionRequest(message=message, locale=locale, group=group or make_group())


def make_candidate(**overrides) -> ExpenseCandidate:
    values = {
        "amount": 5000,
        "title": "Dinner",
        "date": date(2026, 10, 18),
        "participants": ["John", "Jane"],
        "currency": "USD",
    }
    values.update(overrides)
    return ExpenseCandidate(**values)


def make_result(state: ExtractionState = ExtractionState.SUCCESS, **overrides) -> ExpenseExtractionResult:
    values = {
        "amount": 5000,
        "title": "Dinner",
        "date": date(2026, 10, 18),
        "participants": ["John", "Jane"],
        "participant_ids": ["p1", "p2"],
        "currency": "USD",
        "confidence": 1.0,
        "state": state,
        "source": ExtractionSource.LOCAL,
    }
    values.update(overrides)
    return ExpenseExtractionResult(**values)


def make_llm_response(payload: dict | str, model: str = "mock-model") -> LLMResponse:
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return LLMResponse(content=content, model=model, input_tokens=120, output_tokens=40, latency_ms=250)


def model_expense_payload(**overrides) -> dict:
    payload = {
        "intent": "expense_creation",
        "amount": 5000,
        "title": "Dinner",
        "date": "2026-10-18",
        "participants": ["John", "Jane"],
        "currency": "USD",
    }
    payload.update(overrides)
    return payload
