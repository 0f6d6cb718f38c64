"""Global exception handlers: translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_scorer.domain.exceptions import (
    AuthenticationError,
    InvalidAccountHandleError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteApiError,
    RemoteRequestError,
    RepoScorerError,
    ScanTimeoutError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[RepoScorerError], int]] = [
    (InvalidAccountHandleError, 422),
    (AuthenticationError, 401),
    (NotFoundError, 404),
    (RemoteApiError, 502),
    (RemoteRequestError, 502),
    (NetworkError, 503),
    (ScanTimeoutError, 504),
]


def _error_json(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_json(status_code, str(exc))

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    @app.exception_handler(RateLimitError)
    async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
        logger.warning("RateLimitError: %s", exc)
        retry_after = exc.retry_after
        if retry_after is None and exc.reset_at is not None:
            remaining = (exc.reset_at - datetime.now(timezone.utc)).total_seconds()
            retry_after = max(0, math.ceil(remaining))
        headers = None
        if retry_after is not None:
            headers = {"Retry-After": str(retry_after)}
        return _error_json(429, str(exc), headers)

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " -> ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
