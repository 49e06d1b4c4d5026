"""Expense extraction pipeline: remote pass, local pass, merge, confidence gate."""
from __future__ import annotations

import asyncio
import json
from datetime import date

import structlog

from .config import Settings
from .conversation.clarifications import (
    ambiguous_intent_prompt,
    error_message,
    low_confidence_message,
    missing_amount_message,
)
from .conversation.intent_patterns import classify_intent_locally
from .llm.anthropic_client import AnthropicClient
from .llm.base import LLMClient
from .llm.errors import LLMServiceError, classify_llm_error
from .llm.failover import FailoverLLMClient
from .llm.openai_client import OpenAIClient
from .llm.response_parser import extract_json_from_response
from .models.confidence import ConfidenceSignals, determine_state
from .models.expense import (
    ExpenseCandidate,
    ExpenseExtractionResult,
    ExtractionRequest,
    ExtractionSource,
    ExtractionState,
    FallbackReason,
    IntentResult,
)
from .models.intent import ConversationIntent, is_valid_intent
from .passes.local_extraction import run_local_extraction
from .passes.remote_extraction import RemoteOutcome, RemoteStatus, run_remote_extraction
from .passes.validation import validate_expense
from .prompts.registry import PromptRegistry

logger = structlog.get_logger(__name__)

MERGEABLE_FIELDS = ("amount", "title", "date", "participants", "currency", "category", "paid_by")


def merge_candidates(remote: ExpenseCandidate | None, local: ExpenseCandidate) -> tuple[ExpenseCandidate, list[str]]:
    """Remote values win; only fields the remote candidate left empty come from *local*.

    Returns the merged candidate and the names of the fields filled locally.
    """
    if remote is None:
        return local, []

    updates = {}
    for name in MERGEABLE_FIELDS:
        if getattr(remote, name) in (None, [], "") and getattr(local, name) not in (None, [], ""):
            updates[name] = getattr(local, name)
    return remote.model_copy(update=updates), list(updates)


class ExpenseExtractionPipeline:
    """Turns a conversational message into a structured expense."""

    def __init__(
        self,
        settings: Settings,
        llm_client: LLMClient | None = None,
        prompt_registry: PromptRegistry | None = None,
    ):
        self.settings = settings
        self.prompt_registry = prompt_registry or PromptRegistry()

        if llm_client is not None:
            self._llm_client: LLMClient | None = llm_client
        else:
            self._llm_client = self._init_llm_client()

    @property
    def llm_client(self) -> LLMClient | None:
        return self._llm_client

    def _init_llm_client(self) -> LLMClient | None:
        """Build the configured provider client, wrapped in failover when both providers have keys."""
        if not self.settings.enable_llm or not self.settings.llm_configured:
            logger.info("llm_init", mode="disabled", enabled=self.settings.enable_llm)
            return None

        budget = {
            "timeout": self.settings.llm_timeout,
            "max_retries": self.settings.llm_max_retries,
            "base_retry_delay": self.settings.llm_base_retry_delay,
        }
        openai_key = self.settings.openai_api_key.get_secret_value()
        anthropic_key = self.settings.anthropic_api_key.get_secret_value()

        def openai_client() -> LLMClient:
            return OpenAIClient(
                api_key=openai_key,
                model=self.settings.openai_model,
                azure_endpoint=self.settings.azure_openai_endpoint,
                **budget,
            )

        def anthropic_client() -> LLMClient:
            return AnthropicClient(api_key=anthropic_key, model=self.settings.anthropic_model, **budget)

        if self.settings.llm_provider == "anthropic":
            primary, fallback_key, fallback = anthropic_client(), openai_key, openai_client
        else:
            primary, fallback_key, fallback = openai_client(), anthropic_key, anthropic_client

        logger.info("llm_init", mode=self.settings.llm_provider, model=primary.get_model_name())
        if self.settings.enable_failover and fallback_key:
            return FailoverLLMClient(primary, fallback())
        return primary

    def _unavailable_outcome(self) -> RemoteOutcome | None:
        """Outcome used when no client exists: ``None`` if the model is switched off."""
        if not self.settings.enable_llm:
            return None
        return RemoteOutcome(
            status=RemoteStatus.FAILED,
            fallback_reason=FallbackReason.API_UNAVAILABLE,
            error="language model is not configured",
        )

    async def extract_expense(self, request: ExtractionRequest, today: date | None = None) -> ExpenseExtractionResult:
        """Run the remote pass (when available), the local pass, then merge and score."""
        today = today or date.today()
        log = logger.bind(locale=request.locale, message_length=len(request.message))

        if self._llm_client is not None:
            remote = await run_remote_extraction(
                request,
                self._llm_client,
                self.prompt_registry,
                timeout=self.settings.llm_timeout,
                temperature=self.settings.llm_temperature,
                max_tokens=self.settings.llm_max_tokens,
                today=today,
            )
        else:
            remote = self._unavailable_outcome()

        local = run_local_extraction(request, today)
        remote_candidate = remote.candidate if remote is not None else None
        merged, filled = merge_candidates(remote_candidate, local.candidate)

        if remote_candidate is None:
            source = ExtractionSource.LOCAL
        elif filled:
            source = ExtractionSource.MERGED
        else:
            source = ExtractionSource.MODEL

        signals = ConfidenceSignals.from_candidate(merged, request.message)
        state = determine_state(signals, self.settings.success_threshold)
        validation_errors = validate_expense(merged, request.group, today)
        if validation_errors:
            state = ExtractionState.ERROR

        fallback_reason = remote.fallback_reason if remote is not None else None
        clarification = None
        if state == ExtractionState.ERROR:
            if merged.amount is None:
                clarification = missing_amount_message(request.locale)
            elif validation_errors and signals.score >= self.settings.success_threshold:
                clarification = validation_errors[0]
            elif fallback_reason is not None:
                clarification = error_message(fallback_reason, request.locale)
            else:
                clarification = low_confidence_message(request.locale)

        if remote is not None and remote.intent is not None:
            intent = remote.intent
        else:
            local_intent = classify_intent_locally(request.message, request.group.participant_names)
            intent = local_intent.intent if local_intent.intent != ConversationIntent.UNCLEAR else ConversationIntent.EXPENSE_CREATION

        participant_ids = [
            participant.id
            for participant in request.group.participants
            if participant.name in (merged.participants or [])
        ]
        unknown = list(dict.fromkeys([*(remote.unknown_participants if remote else []), *local.missing_names]))

        log.info(
            "expense_extraction_complete",
            state=state.value,
            source=source.value,
            confidence=signals.score,
            fallback_reason=fallback_reason.value if fallback_reason else None,
            filled_locally=filled,
            validation_errors=len(validation_errors),
        )
        return ExpenseExtractionResult(
            amount=merged.amount,
            date=merged.date,
            participants=merged.participants or [],
            participant_ids=participant_ids,
            currency=merged.currency or request.group.currency,
            intent=intent,
            title=merged.title,
            category=merged.category,
            split_mode=merged.split_mode,
            paid_by=merged.paid_by,
            confidence=signals.score,
            state=state,
            source=source,
            fallback_reason=fallback_reason,
            clarification_needed=clarification,
            validation_errors=validation_errors,
            unknown_participants=unknown,
        )

    async def classify_intent(self, request: ExtractionRequest) -> IntentResult:
        """Classify the message's intent, falling back to local patterns on any model failure."""
        participants = request.group.participant_names
        reason: FallbackReason | None = None

        if self._llm_client is None:
            outcome = self._unavailable_outcome()
            reason = outcome.fallback_reason if outcome else None
            result = classify_intent_locally(request.message, participants)
        else:
            try:
                result = await self._classify_with_model(request)
            except Exception as e:
                reason = classify_llm_error(e)
                logger.warning("intent_classification_failed", reason=reason.value, error=str(e), error_type=type(e).__name__)
                result = classify_intent_locally(request.message, participants)

        if result.confidence < self.settings.ambiguity_threshold:
            clarification = error_message(reason, request.locale) if reason else ambiguous_intent_prompt(request.locale)
            return IntentResult(
                intent=ConversationIntent.UNCLEAR,
                confidence=result.confidence,
                extracted_data=result.extracted_data,
                clarification_needed=clarification,
                fallback_reason=reason or FallbackReason.UNKNOWN,
            )
        return result.model_copy(update={"fallback_reason": reason})

    async def _classify_with_model(self, request: ExtractionRequest) -> IntentResult:
        prompt = self.prompt_registry.render("intent_classification", {
            "locale": request.locale,
            "participants": json.dumps(request.group.participant_names, ensure_ascii=False),
            "currency": request.group.currency,
        })
        response = await asyncio.wait_for(
            self._llm_client.complete_text(
                system_prompt=prompt,
                user_prompt=request.message,
                temperature=self.settings.llm_temperature,
                max_tokens=self.settings.llm_max_tokens,
                json_mode=True,
            ),
            timeout=self.settings.llm_timeout,
        )
        data = extract_json_from_response(response.content)

        intent = data.get("intent")
        confidence = data.get("confidence")
        if (
            not is_valid_intent(intent)
            or isinstance(confidence, bool)
            or not isinstance(confidence, (int, float))
            or not 0.0 <= confidence <= 1.0
        ):
            raise LLMServiceError("Invalid response structure from model", FallbackReason.PARSE_ERROR)

        extracted = data.get("extracted_data")
        return IntentResult(
            intent=ConversationIntent(intent),
            confidence=float(confidence),
            extracted_data=extracted if isinstance(extracted, dict) else {},
            clarification_needed=data.get("clarification_needed") or None,
        )

    async def check_llm_health(self) -> tuple[bool, int]:
        """Send a one-token request; returns ``(is_healthy, response_time_ms)``."""
        if self._llm_client is None:
            return False, 0
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            response = await asyncio.wait_for(
                self._llm_client.complete_text("Reply with OK.", "test", max_tokens=1),
                timeout=self.settings.llm_timeout,
            )
            healthy = response is not None
        except Exception as e:
            logger.warning("llm_health_check_failed", reason=classify_llm_error(e).value, error=str(e))
            healthy = False
        return healthy, int((loop.time() - start) * 1000)
