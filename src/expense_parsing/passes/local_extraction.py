"""Local pass: regex and heuristic extraction, no network.

Always runs. Its candidate is either the only source (model disabled, timed
out or failed) or fills the fields the model left empty.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date

import structlog

from ..international.date_parsing import extract_date, extract_date_candidates
from ..international.name_matching import match_participants
from ..international.number_parsing import extract_amount, extract_amount_candidates
from ..models.expense import Category, ExpenseCandidate, ExtractionRequest, GroupContext

logger = structlog.get_logger(__name__)

_MONEY = re.compile(
    r"(?:[$€£¥￥₹₽₴₺]|NT\$|R\$|zł|\b[A-Z]{3}\b)\s*\d+(?:[.,\s]\d+)*"
    r"|\d+(?:[.,]\d+)*\s*(?:[$€£¥￥₹₽₴₺元块]|zł|\b[A-Z]{3}\b|euros?\b|Euro\b)",
)
_DATES = re.compile(
    r"\b(?:today|yesterday|last week|a week ago|hoy|ayer|hier|aujourd'hui|heute|gestern)\b"
    r"|\d{1,4}[/.\-]\d{1,2}[/.\-]\d{1,4}",
    re.IGNORECASE,
)
_FILLER_WORDS = re.compile(
    r"\b(?:i|we|me|my|our|you|paid|pay|spent|spend|cost|costs|bought|for|with|and|the|a|an|on|"
    r"yo|pagué|gasté|con|para|y|je|j'ai|payé|dépensé|avec|pour|et|ich|habe|bezahlt|für|mit|und)\b|&",
    re.IGNORECASE,
)

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "food": ("food", "restaurant", "dinner", "lunch", "breakfast", "coffee", "drink", "groceries", "pizza"),
    "transport": ("uber", "taxi", "bus", "train", "flight", "gas", "parking", "fuel"),
    "entertainment": ("movie", "cinema", "concert", "show", "ticket", "game"),
    "shopping": ("store", "shop", "mall", "amazon", "buy", "purchase"),
}

_SELF_PAYMENT = re.compile(r"\bI\s+(?:paid|spent|bought|covered|got)\b", re.IGNORECASE)


@dataclass
class LocalExtraction:
    candidate: ExpenseCandidate
    missing_names: list[str] = field(default_factory=list)


def extract_title(text: str, participant_names: list[str]) -> str | None:
    """Best-effort short description: the message minus amounts, dates, names and filler words."""
    cleaned = _MONEY.sub(" ", text)
    cleaned = _DATES.sub(" ", cleaned)
    for name in participant_names:
        cleaned = re.sub(rf"(?<!\w){re.escape(name)}(?!\w)", " ", cleaned, flags=re.IGNORECASE)
    cleaned = _FILLER_WORDS.sub(" ", cleaned)

    first_sentence = re.split(r"[.!?]", cleaned)[0]
    words = [w.strip(",;:") for w in first_sentence.split()]
    words = [w for w in words if w]
    if not words:
        return None

    title = " ".join(words[:6])[:100]
    if len(title) < 2:
        return None
    return title[0].upper() + title[1:]


def detect_category(text: str, categories: list[Category]) -> str | None:
    """A category named in the text wins; otherwise keyword groups map to a category containing the group name."""
    if not categories:
        return None
    lowered = text.lower()

    for category in categories:
        if re.search(rf"(?<!\w){re.escape(category.name.lower())}(?!\w)", lowered):
            return category.name

    for category_type, keywords in CATEGORY_KEYWORDS.items():
        if any(re.search(rf"(?<!\w){keyword}", lowered) for keyword in keywords):
            match = next((c for c in categories if category_type in c.name.lower()), None)
            if match:
                return match.name
    return None


def infer_payer(text: str, group: GroupContext) -> str | None:
    """Participant id of whoever paid: the speaker for "I paid", or "<Name> paid"."""
    for participant in group.participants:
        if re.search(rf"(?<!\w){re.escape(participant.name)}\s+(?:paid|spent|bought|covered)\b", text, re.IGNORECASE):
            return participant.id
    if group.active_participant_id and _SELF_PAYMENT.search(text):
        return group.active_participant_id
    return None


def run_local_extraction(request: ExtractionRequest, today: date | None = None) -> LocalExtraction:
    """Extract every expense field from the message with the local parsers."""
    text = request.message
    group = request.group
    today = today or date.today()

    amounts = extract_amount_candidates(text, request.locale, group.currency)
    if amounts:
        amount, currency = amounts[0].amount, amounts[0].currency
    else:
        amount, currency = extract_amount(text), None

    dates = extract_date_candidates(text, request.locale, today)
    expense_date = dates[0].value if dates else extract_date(text, today)

    match = match_participants(text, group.participants, request.locale)
    names = [p.name for p in group.participants if p.id in match.participant_ids]

    candidate = ExpenseCandidate(
        amount=amount,
        title=extract_title(text, group.participant_names),
        date=expense_date,
        participants=names or None,
        currency=currency or group.currency,
        category=detect_category(text, group.categories),
        paid_by=infer_payer(text, group),
    )
    logger.debug(
        "local_extraction_complete",
        message_length=len(text),
        missing_fields=candidate.missing_fields(),
        amount_candidates=len(amounts),
    )
    return LocalExtraction(candidate=candidate, missing_names=match.missing_names)
