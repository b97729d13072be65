"""Per-request logging and request-id propagation."""

import time
import uuid
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from orderdesk.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _request_id(request: Request) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id and logs its outcome.

    The id comes from the caller's ``X-Request-ID`` header when present and
    is bound to the structlog context, so status-update, ledger and invoice
    events logged during the request share it. It is echoed on the response
    together with ``X-Response-Time``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        clear_request_context()
        bind_request_context(request_id=request_id, method=request.method, path=request.url.path)

        logger.info("request_started", client=request.client.host if request.client else "unknown")
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("request_completed", status=response.status_code, duration_ms=round(elapsed_ms, 2))
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            clear_request_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response
