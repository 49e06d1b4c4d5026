"""Expense extraction data models.

Request and result types shared by the extraction passes, the pipeline, the
conversation session and the HTTP layer. Amounts are integer minor units
(cents) throughout.
"""

from __future__ import annotations

import datetime as dt
from enum import StrEnum

from pydantic import BaseModel, Field

from expense_parsing.models.intent import ConversationIntent


class SplitMode(StrEnum):
    EVENLY = "EVENLY"
    BY_SHARES = "BY_SHARES"
    BY_AMOUNT = "BY_AMOUNT"
    BY_PERCENTAGE = "BY_PERCENTAGE"


class FallbackReason(StrEnum):
    """Why the language model's answer was not used as-is."""

    TIMEOUT = "timeout"
    API_UNAVAILABLE = "api_unavailable"
    PARSE_ERROR = "parse_error"
    RATE_LIMIT = "rate_limit"
    UNKNOWN = "unknown"


class ExtractionSource(StrEnum):
    MODEL = "model"
    LOCAL = "local"
    MERGED = "merged"


class ExtractionState(StrEnum):
    """UI state of a single extraction attempt."""

    EXTRACTING = "extracting"
    SUCCESS = "success"
    ERROR = "error"
    EDITING = "editing"


# ---------------------------------------------------------------------------
# Group context
# ---------------------------------------------------------------------------


class Participant(BaseModel):
    """A canonical group member as stored by the group."""

    id: str
    name: str


class Category(BaseModel):
    id: int
    name: str
    grouping: str = ""


class GroupContext(BaseModel):
    """What the extractor knows about the group the message belongs to."""

    group_id: str = ""
    participants: list[Participant] = Field(default_factory=list)
    currency: str = "USD"
    categories: list[Category] = Field(default_factory=list)
    active_participant_id: str | None = None

    @property
    def participant_names(self) -> list[str]:
        return [p.name for p in self.participants]

    def participant_by_name(self, name: str) -> Participant | None:
        folded = name.casefold()
        for participant in self.participants:
            if participant.name.casefold() == folded:
                return participant
        return None


class ExtractionRequest(BaseModel):
    message: str = Field(min_length=1, max_length=500)
    locale: str = "en-US"
    group: GroupContext = Field(default_factory=GroupContext)


# ---------------------------------------------------------------------------
# Extraction candidates and results
# ---------------------------------------------------------------------------


class ParticipantMatch(BaseModel):
    """Outcome of matching free text against the group's participants."""

    participant_ids: list[str] = Field(default_factory=list)
    missing_names: list[str] = Field(default_factory=list)
    confidence: float = 0.2
    all_participants: bool = False


class ExpenseCandidate(BaseModel):
    """Expense fields found by one extraction source; any field may be unset."""

    amount: int | None = Field(default=None, ge=0)
    title: str | None = None
    date: dt.date | None = None
    participants: list[str] | None = None
    currency: str | None = None
    category: str | None = None
    split_mode: SplitMode = SplitMode.EVENLY
    paid_by: str | None = None

    def missing_fields(self) -> list[str]:
        return [
            name for name in ("amount", "title", "date", "participants", "currency", "category", "paid_by")
            if getattr(self, name) in (None, [], "")
        ]


class ExpenseExtractionResult(BaseModel):
    """Structured result handed back to the conversational UI."""

    amount: int | None = None
    date: dt.date | None = None
    participants: list[str] = Field(default_factory=list)
    participant_ids: list[str] = Field(default_factory=list)
    currency: str = "USD"
    intent: ConversationIntent = ConversationIntent.EXPENSE_CREATION
    title: str | None = None
    category: str | None = None
    split_mode: SplitMode = SplitMode.EVENLY
    paid_by: str | None = None
    confidence: float = 0.0
    state: ExtractionState = ExtractionState.ERROR
    source: ExtractionSource = ExtractionSource.LOCAL
    fallback_reason: FallbackReason | None = None
    clarification_needed: str | None = None
    validation_errors: list[str] = Field(default_factory=list)
    unknown_participants: list[str] = Field(default_factory=list)


class ExpenseRecord(BaseModel):
    """A confirmed expense, ready for the persistence layer."""

    title: str
    amount: int = Field(gt=0)
    currency: str
    expense_date: dt.date
    paid_by: str | None = None
    participant_ids: list[str]
    category: str | None = None
    split_mode: SplitMode = SplitMode.EVENLY


class IntentResult(BaseModel):
    """Classification of a conversational message."""

    intent: ConversationIntent
    confidence: float = Field(ge=0.0, le=1.0)
    extracted_data: dict = Field(default_factory=dict)
    clarification_needed: str | None = None
    fallback_reason: FallbackReason | None = None
