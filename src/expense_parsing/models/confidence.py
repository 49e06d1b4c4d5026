"""Confidence scoring and outcome state for an extracted expense.

The score is the fraction of four independent signals that are present in
the merged candidate: an amount, a title, at least one participant, and
expense context words in the message. An extraction is a success only when
an amount exists and the score reaches the configured threshold.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from expense_parsing.models.expense import ExpenseCandidate, ExtractionState

CONTEXT_KEYWORDS: tuple[str, ...] = (
    # en
    "paid", "pay", "spent", "cost", "bill", "total", "price", "bought",
    "dinner", "lunch", "breakfast", "coffee", "groceries", "taxi", "uber", "tickets",
    # es / fr / de
    "pagué", "gasté", "cena", "payé", "dépensé", "dîner", "bezahlt", "ausgegeben", "essen",
)

_CONTEXT_PATTERN = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(word) for word in CONTEXT_KEYWORDS) + r")(?!\w)",
    re.IGNORECASE,
)


def has_context_words(text: str) -> bool:
    return bool(text) and _CONTEXT_PATTERN.search(text) is not None


@dataclass(frozen=True)
class ConfidenceSignals:
    has_amount: bool = False
    has_title: bool = False
    has_participants: bool = False
    has_context_words: bool = False

    @classmethod
    def from_candidate(cls, candidate: ExpenseCandidate, text: str) -> "ConfidenceSignals":
        return cls(
            has_amount=bool(candidate.amount),
            has_title=bool(candidate.title and candidate.title.strip()),
            has_participants=bool(candidate.participants),
            has_context_words=has_context_words(text),
        )

    @property
    def score(self) -> float:
        present = sum((self.has_amount, self.has_title, self.has_participants, self.has_context_words))
        return present / 4


def determine_state(signals: ConfidenceSignals, success_threshold: float = 0.5) -> ExtractionState:
    """``success`` needs an amount and a score at or above *success_threshold*."""
    if signals.has_amount and signals.score >= success_threshold:
        return ExtractionState.SUCCESS
    return ExtractionState.ERROR
