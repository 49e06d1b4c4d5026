"""Request id propagation and access logging."""
from __future__ import annotations
import time
from uuid import uuid4
import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..utils.logging import bind_request_context, clear_request_context

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id to every log line emitted while a request is served.

    The id is taken from the caller's ``x-request-id`` header when present and
    echoed back on the response. Client errors are logged as warnings; an
    unhandled exception becomes a 500 carrying the id so it can be found in
    the logs.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request_error", error=str(e), error_type=type(e).__name__, duration_ms=_elapsed_ms(start))
            response = JSONResponse(status_code=500, content={"detail": "Internal server error", "request_id": request_id})
        else:
            log = logger.warning if 400 <= response.status_code < 500 else logger.info
            log("request", status=response.status_code, duration_ms=_elapsed_ms(start))
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
