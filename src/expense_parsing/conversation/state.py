"""UI state machine for a conversational expense extraction.

``None`` is the idle state before the first submission. A new submission is
accepted from any state; everything else must follow the table below, so for
instance ``editing`` can only return to ``extracting`` through a new
submission.
"""
from __future__ import annotations

from enum import StrEnum

from ..models.expense import ExtractionState

__all__ = ["ExtractionEvent", "ExtractionState", "IllegalTransitionError", "transition"]


class ExtractionEvent(StrEnum):
    SUBMIT = "submit"
    RESOLVE_SUCCESS = "resolve_success"
    RESOLVE_ERROR = "resolve_error"
    EDIT = "edit"
    RETRY = "retry"


class IllegalTransitionError(Exception):
    """Raised when an event is not allowed in the current state."""

    def __init__(self, state: ExtractionState | None, event: str):
        self.state = state
        self.event = event
        super().__init__(f"Event '{event}' is not allowed in state '{state}'")


_TRANSITIONS: dict[tuple[ExtractionState, ExtractionEvent], ExtractionState] = {
    (ExtractionState.EXTRACTING, ExtractionEvent.RESOLVE_SUCCESS): ExtractionState.SUCCESS,
    (ExtractionState.EXTRACTING, ExtractionEvent.RESOLVE_ERROR): ExtractionState.ERROR,
    (ExtractionState.SUCCESS, ExtractionEvent.EDIT): ExtractionState.EDITING,
    (ExtractionState.ERROR, ExtractionEvent.EDIT): ExtractionState.EDITING,
    (ExtractionState.ERROR, ExtractionEvent.RETRY): ExtractionState.EXTRACTING,
}


def transition(state: ExtractionState | None, event: ExtractionEvent) -> ExtractionState:
    """Return the state reached from *state* on *event*, or raise ``IllegalTransitionError``."""
    if event is ExtractionEvent.SUBMIT:
        return ExtractionState.EXTRACTING
    if state is not None and (state, event) in _TRANSITIONS:
        return _TRANSITIONS[(state, event)]
    raise IllegalTransitionError(state, event)
