"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable kind
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from gasstock.application.dto.responses import ErrorResponse
from gasstock.config import get_logger
from gasstock.core.exceptions import InventoryError

logger = get_logger(__name__)


# Map error kinds to HTTP status codes
CODE_STATUS_MAP: dict[str, int] = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "DATABASE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "INTERNAL": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

HINT_MAP: dict[str, str] = {
    "NOT_FOUND": "Check the ID and list the collection to find valid records.",
    "BAD_REQUEST": "Check the request parameters and body.",
    "CONFLICT": "The record is referenced or duplicated. Resolve the conflict first.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "INTERNAL": "An internal error occurred. Check server logs.",
    "VALIDATION_ERROR": "Check the request body fields and types.",
}


def _status_for(exc: Exception) -> int:
    if isinstance(exc, InventoryError):
        return CODE_STATUS_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standard JSON error body."""
    status_code = _status_for(exc)
    error_code = exc.code if isinstance(exc, InventoryError) else "INTERNAL"

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_code=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    # Internal failures never leak their cause
    if isinstance(exc, InventoryError):
        message = exc.message
    else:
        message = "An unexpected error occurred"

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINT_MAP.get(error_code),
        detail=None if status_code >= 500 else _detail(exc),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _detail(exc: Exception) -> str | None:
    if isinstance(exc, InventoryError) and exc.details:
        return "; ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None)
    return None


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence for exceptions no handler converted.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""

    @app.exception_handler(InventoryError)
    async def inventory_exception_handler(
        request: Request,
        exc: InventoryError,
    ) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed bodies and query parameters are BAD_REQUEST."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="BAD_REQUEST",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
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
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=HINT_MAP.get(error_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    if status_code >= 500:
        return "INTERNAL"
    for code, mapped in CODE_STATUS_MAP.items():
        if mapped == status_code:
            return code
    return "HTTP_ERROR"
