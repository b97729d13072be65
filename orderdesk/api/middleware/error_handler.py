"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from orderdesk.application.dto.responses import ErrorResponse
from orderdesk.config import get_logger
from orderdesk.core.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    InvoiceNotFoundError,
    LocationLookupError,
    OrderDeskError,
    OrderFlowError,
    OrderNotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; subclasses before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    OrderFlowError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    OrderNotFoundError: status.HTTP_404_NOT_FOUND,
    InvoiceNotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LocationLookupError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "INVALID_TRANSITION": "Fetch the order to see its current status and the statuses allowed next.",
    "ORDER_NOT_FOUND": "Check the order ID and namespace; try GET /api/orders/{namespace} to list orders.",
    "INVOICE_NOT_FOUND": "Invoices exist only for delivered orders. Try POST /api/invoices/backfill.",
    "LEDGER_WRITE_FAILED": "The change was not applied. Retry the request.",
    "CORRUPT_RECORD": "The stored order record is malformed. Repair it from the counterparty copy.",
    "LOCATION_LOOKUP_FAILED": "The postal code service is unavailable. Enter city and state manually.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
    "KeyError": "The requested key was not found.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the resource.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    502: "An upstream service failed. Retry later.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _format_details(details: dict) -> str | None:
    parts = [f"{k}={v}" for k, v in details.items() if v is not None]
    return "; ".join(parts) or None


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(
        self,
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Convert exception to standardized JSON response."""
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        for exc_type, code in EXCEPTION_STATUS_MAP.items():
            if isinstance(exc, exc_type):
                status_code = code
                break

        # Prefer OrderDeskError.code, fall back to class name
        if isinstance(exc, OrderDeskError):
            error_code = exc.code
            message = exc.message
            detail = _format_details(exc.details)
        else:
            error_code = exc.__class__.__name__
            message = str(exc)
            detail = None

        request_id = getattr(request.state, "request_id", None)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "request_error",
            request_id=request_id,
            path=request.url.path,
            status=status_code,
            error_type=error_code,
            error=message,
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        error_response = ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail,
            path=request.url.path,
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response.model_dump(mode="json"),
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code, exc.detail or "")
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int, detail: str) -> str:
    """Infer a machine-readable error code from HTTPException detail."""
    detail_lower = detail.lower()

    if status_code == 404:
        if "invoice" in detail_lower:
            return "INVOICE_NOT_FOUND"
        if "order" in detail_lower:
            return "ORDER_NOT_FOUND"
        return "NOT_FOUND"

    if status_code == 400:
        return "BAD_REQUEST"

    if status_code == 409:
        return "CONFLICT"

    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"

    return "HTTP_ERROR"
