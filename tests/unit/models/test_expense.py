"""Test expense request and result models."""
import pytest
from datetime import date
from pydantic import ValidationError
from expense_parsing.models.expense import (
    ExpenseCandidate, ExpenseExtractionResult, ExpenseRecord, ExtractionRequest, ExtractionState,
    IntentResult, SplitMode,
)
from expense_parsing.models.intent import ConversationIntent
from tests.factories import make_group


class TestExtractionRequest:
    def test_defaults(self):
        request = ExtractionRequest(message="Coffee $4")
        assert request.locale == "en-US"
        assert request.group.participants == []

    def test_empty_message_rejected(self):
        with pytest.raises(ValidationError):
            ExtractionRequest(message="")

    def test_message_length_limit(self):
        with pytest.raises(ValidationError):
            ExtractionRequest(message="x" * 501)


class TestGroupContext:
    def test_participant_by_name_casefold(self):
        group = make_group()
        assert group.participant_by_name("jOHN").id == "p1"
        assert group.participant_by_name("Alice") is None

    def test_participant_names(self):
        assert make_group().participant_names == ["John", "Jane", "Bob"]


class TestExpenseCandidate:
    def test_missing_fields(self):
        candidate = ExpenseCandidate(amount=100, participants=[])
        assert candidate.missing_fields() == ["title", "date", "participants", "currency", "category", "paid_by"]

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            ExpenseCandidate(amount=-1)


class TestResults:
    def test_result_defaults(self):
        result = ExpenseExtractionResult()
        assert result.state == ExtractionState.ERROR
        assert result.intent == ConversationIntent.EXPENSE_CREATION
        assert result.split_mode == SplitMode.EVENLY

    def test_result_serializes_enums_as_values(self):
        data = ExpenseExtractionResult(amount=5000, date=date(2026, 10, 18)).model_dump(mode="json")
        assert data["state"] == "error"
        assert data["date"] == "2026-10-18"

    def test_record_needs_positive_amount(self):
        with pytest.raises(ValidationError):
            ExpenseRecord(title="Dinner", amount=0, currency="USD", expense_date=date(2026, 10, 18), participant_ids=[])

    def test_intent_confidence_bounds(self):
        with pytest.raises(ValidationError):
            IntentResult(intent=ConversationIntent.UNCLEAR, confidence=1.5)
