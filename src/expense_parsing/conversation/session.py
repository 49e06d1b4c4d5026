"""One user's conversational expense entry: submit, edit, retry, confirm."""
from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import structlog

from ..models.expense import (
    ExpenseExtractionResult,
    ExpenseRecord,
    ExtractionRequest,
    ExtractionState,
)
from ..pipeline import ExpenseExtractionPipeline
from ..storage.interface import ExpenseStore
from .state import ExtractionEvent, IllegalTransitionError, transition

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = frozenset({
    "amount", "title", "date", "participants", "participant_ids",
    "currency", "category", "split_mode", "paid_by",
})


class ExtractionSession:
    """Holds the UI state of one conversational expense entry.

    Every submission gets a generation number. A result that arrives after a
    newer submission (or a cancel) is discarded and ``None`` is returned, so a
    slow model call can never overwrite a newer extraction.
    """

    def __init__(self, pipeline: ExpenseExtractionPipeline):
        self._pipeline = pipeline
        self._state: ExtractionState | None = None
        self._result: ExpenseExtractionResult | None = None
        self._request: ExtractionRequest | None = None
        self._generation = 0

    @property
    def state(self) -> ExtractionState | None:
        return self._state

    @property
    def result(self) -> ExpenseExtractionResult | None:
        return self._result

    async def submit(self, request: ExtractionRequest) -> ExpenseExtractionResult | None:
        self._state = transition(self._state, ExtractionEvent.SUBMIT)
        self._request = request
        self._result = None
        return await self._run(request)

    async def retry(self) -> ExpenseExtractionResult | None:
        """Run the last request again; only allowed from ``error``."""
        self._state = transition(self._state, ExtractionEvent.RETRY)
        self._result = None
        return await self._run(self._request)

    def cancel(self) -> None:
        """Abandon any in-flight extraction and go back to idle."""
        self._generation += 1
        self._state = None
        self._result = None

    def edit(self, **changes: Any) -> ExpenseExtractionResult:
        """Apply user corrections to the current result and enter ``editing``."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {sorted(unknown)}")
        next_state = self._state
        if self._state is not ExtractionState.EDITING:
            next_state = transition(self._state, ExtractionEvent.EDIT)

        # an invalid value leaves both the state and the result untouched
        updated = {**self._result.model_dump(), **changes, "state": ExtractionState.EDITING}
        edited = ExpenseExtractionResult.model_validate(updated)
        self._state = next_state
        self._result = edited
        return edited

    async def confirm(self, store: ExpenseStore) -> str:
        """Hand the finished expense to *store* and return its id.

        Only a ``success`` or ``editing`` result can be confirmed, and it must
        carry an amount and a title.
        """
        if self._state not in (ExtractionState.SUCCESS, ExtractionState.EDITING):
            raise IllegalTransitionError(self._state, "confirm")

        result = self._result
        if not result.amount or not result.title:
            raise ValueError("An expense needs an amount and a title before it can be saved")

        record = ExpenseRecord(
            title=result.title,
            amount=result.amount,
            currency=result.currency,
            expense_date=result.date or date.today(),
            paid_by=result.paid_by,
            participant_ids=result.participant_ids,
            category=result.category,
            split_mode=result.split_mode,
        )
        expense_id = await store.save_expense(self._request.group.group_id, record)
        logger.info("expense_confirmed", expense_id=expense_id, amount=record.amount, participants=len(record.participant_ids))

        self._state = None
        self._result = None
        return expense_id

    async def _run(self, request: ExtractionRequest) -> ExpenseExtractionResult | None:
        self._generation += 1
        generation = self._generation

        try:
            result = await self._pipeline.extract_expense(request)
        except asyncio.CancelledError:
            if generation == self._generation:
                self.cancel()
            raise

        if generation != self._generation:
            logger.info("stale_extraction_discarded", generation=generation, current=self._generation)
            return None

        event = ExtractionEvent.RESOLVE_SUCCESS if result.state == ExtractionState.SUCCESS else ExtractionEvent.RESOLVE_ERROR
        self._state = transition(self._state, event)
        self._result = result
        return result
