"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog
from ..config import Settings
from ..pipeline import ExpenseExtractionPipeline
from ..utils.logging import setup_logging
from .middleware import RequestLoggingMiddleware
from .routes import conversation, health

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, pipeline: ExpenseExtractionPipeline | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("api_startup", llm_enabled=app.state.pipeline.llm_client is not None)
        yield
        logger.info("api_shutdown")

    setup_logging(settings.log_level)

    app = FastAPI(
        title="Expense Parsing API",
        description="Natural-language expense extraction for group expense splitting",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.state.settings = settings
    app.state.pipeline = pipeline or ExpenseExtractionPipeline(settings)

    app.include_router(health.router, tags=["health"])
    app.include_router(conversation.router, prefix="/conversation", tags=["conversation"])

    return app
