"""API middleware."""

from gasstock.api.middleware.error_handler import ErrorHandlerMiddleware
from gasstock.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
