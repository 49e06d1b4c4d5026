"""Validation of a merged expense candidate against its group."""
from __future__ import annotations

from datetime import date

from ..international.date_parsing import is_valid_expense_date
from ..international.number_parsing import MAX_AMOUNT_CENTS
from ..models.expense import ExpenseCandidate, GroupContext, SplitMode

MIN_TITLE_LENGTH = 2
MAX_TITLE_LENGTH = 100


def validate_expense(candidate: ExpenseCandidate, group: GroupContext, today: date | None = None) -> list[str]:
    """Return human-readable problems with *candidate*; an empty list means valid.

    Participant, payer and category checks only apply when the group lists
    participants or categories.
    """
    errors: list[str] = []

    if candidate.amount is None:
        errors.append("Amount is required")
    elif not 0 < candidate.amount <= MAX_AMOUNT_CENTS:
        errors.append(f"Amount must be between 1 and {MAX_AMOUNT_CENTS} minor units")

    title = (candidate.title or "").strip()
    if len(title) < MIN_TITLE_LENGTH:
        errors.append("Title must be at least 2 characters")
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append("Title must be at most 100 characters")

    if group.participants:
        if not candidate.participants:
            errors.append("At least one participant is required")
        else:
            unknown = [name for name in candidate.participants if group.participant_by_name(name) is None]
            if unknown:
                errors.append(f"Unknown participants: {', '.join(unknown)}")

        if candidate.paid_by and candidate.paid_by not in {p.id for p in group.participants}:
            errors.append("Payer is not a member of the group")

    if candidate.category and group.categories:
        if candidate.category not in {c.name for c in group.categories}:
            errors.append(f"Unknown category: {candidate.category}")

    if candidate.date is not None and not is_valid_expense_date(candidate.date, today):
        errors.append("Date must be within one year of today")

    if candidate.split_mode not in list(SplitMode):
        errors.append(f"Invalid split mode: {candidate.split_mode}")

    return errors
