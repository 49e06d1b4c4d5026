"""Keyword and regex intent classification used when the model is unavailable."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from ..international.number_parsing import extract_amount
from ..models.confidence import has_context_words
from ..models.expense import IntentResult
from ..models.intent import ConversationIntent


@dataclass(frozen=True)
class IntentPattern:
    pattern: re.Pattern[str]
    intent: ConversationIntent
    confidence: float
    query_type: str
    # Index of the group holding a participant name, if any.
    name_group: int | None = None


def _p(regex: str) -> re.Pattern[str]:
    return re.compile(regex, re.IGNORECASE)


INTENT_PATTERNS: tuple[IntentPattern, ...] = (
    # Reimbursement: "Did John pay me back?"
    IntentPattern(_p(r"(?:did|has)\s+(\S+)\s+(?:pa(?:y|id)\s.*back|paid\s.*me|reimburse)"),
                  ConversationIntent.REIMBURSEMENT_STATUS, 0.9, "reimbursement_status", 1),
    # Balances
    IntentPattern(_p(r"(?:how much|what.*amount).*(?:do|did)\s+I\s+owe\s+(\S+)"),
                  ConversationIntent.BALANCE_QUERY, 0.9, "specific_balance", 1),
    IntentPattern(_p(r"(?:how much|what.*amount).*(?:does|do)\s+(\S+)\s+owe"),
                  ConversationIntent.BALANCE_QUERY, 0.9, "specific_balance", 1),
    IntentPattern(_p(r"(?:what.*my|show.*my)\s+balance.*with\s+(\S+)"),
                  ConversationIntent.BALANCE_QUERY, 0.9, "specific_balance", 1),
    IntentPattern(_p(r"(?:show|display|what.*are?).*balanc(?:es?|ing)"),
                  ConversationIntent.BALANCE_QUERY, 0.8, "general_balance"),
    IntentPattern(_p(r"who.*(?:owes?|needs? to pay|should pay)"),
                  ConversationIntent.BALANCE_QUERY, 0.8, "general_balance"),
    IntentPattern(_p(r"(?:how.*settl|suggest.*payment|optimal.*reimburse)"),
                  ConversationIntent.BALANCE_QUERY, 0.8, "settlement_suggestions"),
    # Group management
    IntentPattern(_p(r"\b(?:create|start|make)\s+(?:a\s+)?(?:new\s+)?group\b|\bnew\s+group\b"),
                  ConversationIntent.GROUP_MANAGEMENT, 0.8, "create_group"),
    IntentPattern(_p(r"\b(?:add|invite|include)\s+(.+?)\s+(?:to|in)\s+(?:the\s+)?group\b"),
                  ConversationIntent.GROUP_MANAGEMENT, 0.8, "add_participant"),
    IntentPattern(_p(r"\b(?:remove|kick|delete)\s+(.+?)\s+from\s+(?:the\s+)?group\b"),
                  ConversationIntent.GROUP_MANAGEMENT, 0.8, "remove_participant"),
    IntentPattern(_p(r"\b(?:show\s+(?:me\s+)?(?:all\s+)?(?:my\s+)?|list\s+(?:all\s+)?(?:my\s+)?|my\s+)groups\b"),
                  ConversationIntent.GROUP_MANAGEMENT, 0.8, "list_groups"),
    IntentPattern(_p(r"\bchange\s+(?:group\s+)?(?:currency|name|title)\s+to\b"),
                  ConversationIntent.GROUP_MANAGEMENT, 0.8, "update_group"),
    # History
    IntentPattern(_p(r"\b(?:show|list|display|what)\b.*\b(?:expenses|spending|history|transactions)\b"),
                  ConversationIntent.EXPENSE_HISTORY, 0.8, "expense_history"),
    IntentPattern(_p(r"\bhow much did (?:we|i)\s+spend\b"),
                  ConversationIntent.EXPENSE_HISTORY, 0.8, "spending_summary"),
)


def _find_participant(name: str, participants: Sequence[str]) -> str | None:
    cleaned = re.sub(r"[^\w]", "", name).casefold()
    return next((p for p in participants if p.casefold() == cleaned), None)


def classify_intent_locally(
    text: str,
    participants: Sequence[str] = (),
) -> IntentResult:
    """Classify *text* without a language model.

    Explicit query patterns are tried first. Otherwise a detected amount and
    expense vocabulary point to expense creation, with lower confidence when
    only one of the two is present. Anything else is ``unclear`` with zero
    confidence.
    """
    for rule in INTENT_PATTERNS:
        match = rule.pattern.search(text)
        if not match:
            continue
        data: dict = {"query_type": rule.query_type}
        if rule.name_group is not None:
            target = _find_participant(match.group(rule.name_group), participants)
            if target:
                data["target_user"] = target
        return IntentResult(intent=rule.intent, confidence=rule.confidence, extracted_data=data)

    amount = extract_amount(text)
    context = has_context_words(text)
    if amount is not None and context:
        return IntentResult(intent=ConversationIntent.EXPENSE_CREATION, confidence=0.8, extracted_data={"amount": amount})
    if amount is not None:
        return IntentResult(intent=ConversationIntent.EXPENSE_CREATION, confidence=0.6, extracted_data={"amount": amount})
    if context:
        return IntentResult(intent=ConversationIntent.EXPENSE_CREATION, confidence=0.4)

    return IntentResult(intent=ConversationIntent.UNCLEAR, confidence=0.0)
