"""Health check endpoints."""
from __future__ import annotations
from datetime import datetime, timezone
from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok", "service": "expense-parsing-api"}


@router.get("/conversation/llm-health")
async def llm_health(request: Request):
    """Probe the language model with a one-token request."""
    is_healthy, response_time_ms = await request.app.state.pipeline.check_llm_health()
    return {
        "is_healthy": is_healthy,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "response_time_ms": response_time_ms,
    }
