# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
StrokeLens - Errors and Global Error Handler
Domain exceptions raised by the loader, validator and matcher, and the
handlers that turn them into the service's JSON error envelope:

    {"error": {"code": "STROKE_INPUT_ERROR", "message": "...", "detail": "..."}}

  StrokeInputError        → 422  bad query strokes / feature vectors
  RequestValidationError  → 422  request body does not match the schema
  CorpusValidationError   → 422  reload rejected, previous corpus kept
  CorpusNotLoadedError    → 503  no corpus in service yet
  anything else           → 500  traceback logged, not returned
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from strokelens.utils.logger import get_logger

log = get_logger(__name__)


class CorpusValidationError(ValueError):
    """A corpus record is malformed. The whole load is rejected."""


class StrokeInputError(ValueError):
    """Query strokes or feature vectors failed validation."""


class CorpusNotLoadedError(RuntimeError):
    """A match was requested before any corpus was loaded."""


def _error_response(
    status_code: int,
    code: str,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = {"error": {"code": code, "message": message}}
    if detail:
        body["error"]["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{where or 'body'}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Attach every handler to app. Called from create_app()."""

    @app.exception_handler(StrokeInputError)
    async def stroke_input_handler(
        req: Request, exc: StrokeInputError
    ) -> JSONResponse:
        log.warning("stroke_input_error", path=req.url.path, error=str(exc))
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "STROKE_INPUT_ERROR", str(exc)
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        req: Request, exc: RequestValidationError
    ) -> JSONResponse:
        detail = _describe_validation_errors(exc)
        log.warning("request_validation_error", path=req.url.path, detail=detail)
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "REQUEST_VALIDATION_ERROR",
            "Request body does not match the expected schema.",
            detail=detail,
        )

    @app.exception_handler(CorpusValidationError)
    async def corpus_validation_handler(
        req: Request, exc: CorpusValidationError
    ) -> JSONResponse:
        log.error("corpus_validation_error", path=req.url.path, error=str(exc))
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "CORPUS_VALIDATION_ERROR",
            "The corpus could not be loaded.",
            detail=str(exc),
        )

    @app.exception_handler(CorpusNotLoadedError)
    async def corpus_not_loaded_handler(
        req: Request, exc: CorpusNotLoadedError
    ) -> JSONResponse:
        log.warning("corpus_not_loaded", path=req.url.path)
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE, "CORPUS_NOT_LOADED", str(exc)
        )

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> JSONResponse:
        log.error(
            "unhandled_exception",
            path=req.url.path,
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback="".join(traceback.format_exception(exc)),
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred.",
        )
