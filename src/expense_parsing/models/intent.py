"""Conversational intents a message can be classified into."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ConversationIntent(StrEnum):
    EXPENSE_CREATION = "expense_creation"
    BALANCE_QUERY = "balance_query"
    GROUP_MANAGEMENT = "group_management"
    EXPENSE_HISTORY = "expense_history"
    REIMBURSEMENT_STATUS = "reimbursement_status"
    UNCLEAR = "unclear"


VALID_INTENTS: frozenset[str] = frozenset(intent.value for intent in ConversationIntent)


def is_valid_intent(candidate: Any) -> bool:
    """True only for the exact, case-sensitive value of a known intent."""
    return isinstance(candidate, str) and candidate in VALID_INTENTS
