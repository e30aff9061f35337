"""Exception handlers for the HTTP layer.

Upstream model failures never arrive here; the gateway degrades them to
apologies.  What does arrive is a bad student context (422), a request that
reached a route before the gateway was initialised (503), malformed request
bodies (422) and programming errors (500).  Every failure uses the
``{"status": "error", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from syncsenta_ai.domain.exceptions import (
    ConfigurationError,
    InvalidTutoringContextError,
    SyncSentaError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."

_STATUS_BY_ERROR: dict[type[SyncSentaError], int] = {
    InvalidTutoringContextError: 422,
    ConfigurationError: 503,
}


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def status_for(exc: SyncSentaError) -> int | None:
    """HTTP status for a domain error, or ``None`` if it is not client-facing."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return None


def describe_validation_errors(errors: list[dict]) -> str:
    """Join pydantic errors as ``field.path: message`` using the JSON field names."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    @app.exception_handler(SyncSentaError)
    async def domain_handler(request: Request, exc: SyncSentaError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code is None:
            logger.error(
                "Unmapped %s on %s %s", type(exc).__name__, request.method, request.url.path,
                exc_info=exc,
            )
            return _error_json(500, INTERNAL_ERROR_MESSAGE)

        logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return _error_json(status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = describe_validation_errors(list(exc.errors()))
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return _error_json(422, message)

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_json(500, INTERNAL_ERROR_MESSAGE)
