"""Test local intent classification."""
import pytest
from expense_parsing.conversation.intent_patterns import classify_intent_locally
from expense_parsing.models.intent import ConversationIntent

PARTICIPANTS = ["John", "Jane", "Bob"]


class TestClassifyIntentLocally:
    def test_reimbursement(self):
        result = classify_intent_locally("Did Jane pay me back?", PARTICIPANTS)
        assert result.intent == ConversationIntent.REIMBURSEMENT_STATUS
        assert result.extracted_data == {"query_type": "reimbursement_status", "target_user": "Jane"}
        assert result.confidence == 0.9

    def test_i_owe_someone(self):
        result = classify_intent_locally("How much do I owe Bob?", PARTICIPANTS)
        assert result.intent == ConversationIntent.BALANCE_QUERY
        assert result.extracted_data["target_user"] == "Bob"

    def test_someone_owes(self):
        result = classify_intent_locally("How much does John owe?", PARTICIPANTS)
        assert result.extracted_data == {"query_type": "specific_balance", "target_user": "John"}

    def test_general_balance(self):
        result = classify_intent_locally("Who owes money?", PARTICIPANTS)
        assert result.intent == ConversationIntent.BALANCE_QUERY
        assert result.extracted_data == {"query_type": "general_balance"}

    def test_unknown_target_not_reported(self):
        result = classify_intent_locally("How much do I owe Alice?", PARTICIPANTS)
        assert "target_user" not in result.extracted_data

    @pytest.mark.parametrize("text, query_type", [
        ("Create a new group for the trip", "create_group"),
        ("Add Maria to the group", "add_participant"),
        ("Remove Bob from the group", "remove_participant"),
        ("Show me all my groups", "list_groups"),
        ("Change currency to EUR", "update_group"),
    ])
    def test_group_management(self, text, query_type):
        result = classify_intent_locally(text, PARTICIPANTS)
        assert result.intent == ConversationIntent.GROUP_MANAGEMENT
        assert result.extracted_data["query_type"] == query_type

    def test_history(self):
        result = classify_intent_locally("Show last month's expenses", PARTICIPANTS)
        assert result.intent == ConversationIntent.EXPENSE_HISTORY

    def test_amount_and_context(self):
        result = classify_intent_locally("I paid $50 for dinner")
        assert result.intent == ConversationIntent.EXPENSE_CREATION
        assert result.confidence == 0.8
        assert result.extracted_data == {"amount": 5000}

    def test_amount_only(self):
        assert classify_intent_locally("Movie $12").confidence == 0.6

    def test_context_only(self):
        assert classify_intent_locally("dinner with John").confidence == 0.4

    def test_unclear(self):
        result = classify_intent_locally("hello there")
        assert result.intent == ConversationIntent.UNCLEAR
        assert result.confidence == 0.0
