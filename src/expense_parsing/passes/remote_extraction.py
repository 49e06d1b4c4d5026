"""Remote pass: ask the language model for a structured expense.

Failures are returned as a ``RemoteOutcome`` value, never raised, so the
pipeline can always continue with the local pass.
"""
from __future__ import annotations

import asyncio
import json
from datetime import date
from enum import StrEnum

import structlog
from pydantic import BaseModel, Field

from ..international.currency_patterns import get_currency_pattern
from ..international.name_matching import canonicalize_names
from ..llm.base import LLMClient
from ..llm.errors import classify_llm_error
from ..llm.response_parser import extract_json_from_response
from ..models.expense import (
    ExpenseCandidate,
    ExtractionRequest,
    FallbackReason,
    GroupContext,
    SplitMode,
)
from ..models.intent import ConversationIntent, VALID_INTENTS, is_valid_intent
from ..prompts.registry import PromptRegistry

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = "You are a precise assistant that turns expense messages into JSON."


class RemoteStatus(StrEnum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


class RemoteOutcome(BaseModel):
    """What the model call produced, including why it could not be used."""

    status: RemoteStatus
    candidate: ExpenseCandidate | None = None
    intent: ConversationIntent | None = None
    fallback_reason: FallbackReason | None = None
    error: str | None = None
    unknown_participants: list[str] = Field(default_factory=list)
    dropped_fields: list[str] = Field(default_factory=list)
    latency_ms: int = 0


class _RemotePayload(BaseModel):
    """Raw model answer; values are checked one by one afterwards."""

    intent: str | None = None
    amount: float | None = Field(default=None, allow_inf_nan=False)
    title: str | None = None
    date: str | None = None
    participants: list[str] | None = None
    currency: str | None = None
    category: str | None = None
    paid_by: str | None = None
    split_mode: str | None = None


def build_prompt_variables(request: ExtractionRequest, today: date) -> dict:
    pattern = get_currency_pattern(request.locale)
    group = request.group
    return {
        "today": today.isoformat(),
        "locale": request.locale,
        "currency": group.currency,
        "decimal_separator": pattern.decimal_separator,
        "thousands_separator": pattern.thousands_separator,
        "number_format": pattern.number_format,
        "participants": json.dumps(group.participant_names, ensure_ascii=False),
        "categories": json.dumps([c.name for c in group.categories], ensure_ascii=False),
        "intents": ", ".join(sorted(VALID_INTENTS)),
    }


def _to_candidate(payload: _RemotePayload, group: GroupContext) -> tuple[ExpenseCandidate, ConversationIntent | None, list[str], list[str]]:
    """Validate the model's values against the group.

    Returns ``(candidate, intent, unknown_participants, dropped_fields)``.
    """
    dropped: list[str] = []

    amount = None
    if payload.amount is not None:
        if payload.amount > 0:
            amount = int(round(payload.amount))
        else:
            dropped.append("amount")

    expense_date = None
    if payload.date:
        try:
            expense_date = date.fromisoformat(payload.date)
        except ValueError:
            dropped.append("date")

    matched, unknown = canonicalize_names(payload.participants or [], group.participants)

    paid_by = None
    if payload.paid_by:
        payers, _ = canonicalize_names([payload.paid_by], group.participants)
        if payers:
            paid_by = payers[0].id
        else:
            dropped.append("paid_by")

    category = payload.category
    if category and group.categories:
        known = next((c.name for c in group.categories if c.name.casefold() == category.casefold()), None)
        if known is None:
            dropped.append("category")
        category = known

    split_mode = SplitMode.EVENLY
    if payload.split_mode:
        try:
            split_mode = SplitMode(payload.split_mode.upper())
        except ValueError:
            dropped.append("split_mode")

    intent = None
    if payload.intent is not None:
        if is_valid_intent(payload.intent):
            intent = ConversationIntent(payload.intent)
        else:
            dropped.append("intent")

    currency = payload.currency.strip().upper() if payload.currency and payload.currency.strip() else None
    title = payload.title.strip() if payload.title and payload.title.strip() else None

    candidate = ExpenseCandidate(
        amount=amount,
        title=title,
        date=expense_date,
        participants=[p.name for p in matched] or None,
        currency=currency,
        category=category,
        split_mode=split_mode,
        paid_by=paid_by,
    )
    return candidate, intent, unknown, dropped


async def run_remote_extraction(
    request: ExtractionRequest,
    llm_client: LLMClient,
    prompt_registry: PromptRegistry,
    *,
    timeout: float,
    temperature: float = 0.1,
    max_tokens: int = 500,
    today: date | None = None,
) -> RemoteOutcome:
    """Call the model under *timeout* and turn its answer into a candidate."""
    today = today or date.today()
    prompt = prompt_registry.render("expense_extraction", build_prompt_variables(request, today))

    try:
        response = await asyncio.wait_for(
            llm_client.complete_text(
                system_prompt=SYSTEM_PROMPT + "\n\n" + prompt,
                user_prompt=request.message,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=True,
            ),
            timeout=timeout,
        )
        payload = _RemotePayload.model_validate(extract_json_from_response(response.content))
        candidate, intent, unknown, dropped = _to_candidate(payload, request.group)
    except Exception as e:
        reason = classify_llm_error(e)
        logger.warning(
            "remote_extraction_failed",
            reason=reason.value,
            error=str(e),
            error_type=type(e).__name__,
            model=llm_client.get_model_name(),
        )
        return RemoteOutcome(status=RemoteStatus.FAILED, fallback_reason=reason, error=str(e))

    status = RemoteStatus.DEGRADED if (dropped or unknown or candidate.amount is None) else RemoteStatus.SUCCESS

    logger.info(
        "remote_extraction_complete",
        status=status.value,
        model=response.model,
        latency_ms=response.latency_ms,
        tokens=response.total_tokens,
        dropped_fields=dropped,
        unknown_participants=len(unknown),
        prompt_version=prompt_registry.get_version("expense_extraction"),
    )
    return RemoteOutcome(
        status=status,
        candidate=candidate,
        intent=intent,
        unknown_participants=unknown,
        dropped_fields=dropped,
        latency_ms=response.latency_ms,
    )
