"""Conversational expense endpoints."""
from __future__ import annotations
from datetime import date
from fastapi import APIRouter, HTTPException, Request
import structlog

from ...models.expense import ExpenseExtractionResult, ExtractionRequest, IntentResult

router = APIRouter()
logger = structlog.get_logger(__name__)


def _pipeline(request: Request):
    settings = request.app.state.settings
    if not settings.enable_conversational_expense:
        raise HTTPException(status_code=404, detail="Conversational expense entry is disabled")
    return request.app.state.pipeline


@router.post("/expense", response_model=ExpenseExtractionResult)
async def extract_expense(body: ExtractionRequest, request: Request):
    """Extract a structured expense from a free-text message."""
    pipeline = _pipeline(request)
    result = await pipeline.extract_expense(body, today=date.today())
    return result


@router.post("/intent", response_model=IntentResult)
async def classify_intent(body: ExtractionRequest, request: Request):
    """Classify what the user wants to do with a message."""
    pipeline = _pipeline(request)
    return await pipeline.classify_intent(body)


@router.get("/config")
async def get_config(request: Request):
    """Expose the model-call budget so clients can size their own timeouts."""
    settings = request.app.state.settings
    return {
        "timeout_ms": int(settings.llm_timeout * 1000),
        "max_retries": settings.llm_max_retries,
        "base_retry_delay_ms": int(settings.llm_base_retry_delay * 1000),
        "enable_fallback": True,
        "llm_enabled": request.app.state.pipeline.llm_client is not None,
        "success_threshold": settings.success_threshold,
        "default_locale": settings.default_locale,
    }
