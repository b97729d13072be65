"""API middleware."""

from orderdesk.api.middleware.error_handler import ErrorHandlerMiddleware
from orderdesk.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
