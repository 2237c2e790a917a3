"""API middleware: request logging and error handling.

Starlette runs middleware last-added-first, so ``create_app`` adds
ErrorHandlingMiddleware before RequestLoggingMiddleware: the logger then
sees the final status code after errors have been converted to JSON.
"""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from codechunk.api.schemas import ErrorResponse
from codechunk.utils.errors import (
    CodeChunkError,
    ConfigurationError,
    InputError,
    JobCancelledError,
    StorageError,
)
from codechunk.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Most specific first: JobCancelledError before its PipelineError parent.
_STATUS_BY_ERROR: tuple[tuple[type[CodeChunkError], int], ...] = (
    (InputError, 400),
    (StorageError, 502),
    (JobCancelledError, 504),
    (ConfigurationError, 500),
)


def status_for(exc: CodeChunkError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one ``api_request`` event per call with its status and latency."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            _logger.info(
                "api_request",
                method=request.method,
                route=request.url.path,
                status=status,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Render ``CodeChunkError`` subclasses as :class:`ErrorResponse` JSON.

    The client gets the error class and message; the provider that failed
    is only logged.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except CodeChunkError as exc:
            status = status_for(exc)
            _logger.error(
                "api_request_failed",
                route=request.url.path,
                status=status,
                error_type=type(exc).__name__,
                provider=exc.provider_name,
                error=exc.message,
            )
            payload = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=status, content=payload.model_dump())
